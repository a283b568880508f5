"""
GBIF API client.

Low-level HTTP helpers for the GBIF API v1. Errors propagate to the
calling datasource module, which decides how to fail soft.

API docs: https://techdocs.gbif.org/en/openapi/
"""

from __future__ import annotations

from typing import Any

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.services.http import session

SOURCE = "gbif.org"

MAX_LIMIT = 300  # API maximum for /occurrence/search


def _url(endpoint: str) -> str:
    return f"{get_settings().gbif_api_base.rstrip('/')}/{endpoint.lstrip('/')}"


def _get(endpoint: str, params: dict[str, Any] | None = None) -> Any:
    """GET a GBIF endpoint and return the decoded JSON body."""
    resp = session.get(_url(endpoint), params=params or {})
    resp.raise_for_status()
    return resp.json()


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def browse_gadm(country_code: str) -> Any:
    """GET /geocode/gadm/browse/{countryCode} — level-1 regions of a country."""
    return _get(f"geocode/gadm/browse/{country_code}")


def search_occurrences(params: dict[str, Any]) -> Any:
    """GET /occurrence/search — raw occurrence records."""
    return _get("occurrence/search", params)


def get_species(key: int | str) -> Any:
    """GET /species/{key} — backbone species record."""
    return _get(f"species/{key}")
