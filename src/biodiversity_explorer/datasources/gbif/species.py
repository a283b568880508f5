"""GBIF backbone species lookups."""

from __future__ import annotations

import logging
from typing import Any

import requests

from biodiversity_explorer.datasources.gbif import client

logger = logging.getLogger(__name__)


def get_species(key: int | str | None) -> dict[str, Any] | None:
    """Fetch a backbone species record (vernacular name, taxonomy).

    Returns None for a falsy key, an unknown key, or any provider failure.
    """
    if not key:
        return None
    try:
        payload = client.get_species(key)
    except (requests.RequestException, ValueError) as e:
        logger.warning("GBIF species lookup failed for %s: %s", key, e)
        return None
    return payload if isinstance(payload, dict) else None
