"""Image identification with iNaturalist's computer vision model."""

from __future__ import annotations

import logging

import requests

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources.inaturalist import client
from biodiversity_explorer.datasources.inaturalist.parsing import parse_candidates
from biodiversity_explorer.schemas import IdentificationCandidate

logger = logging.getLogger(__name__)


def identify(
    image: bytes,
    lat: float | None = None,
    lon: float | None = None,
) -> list[IdentificationCandidate]:
    """
    Score an image and return ranked taxon suggestions.

    The model uses a locality prior, so a location is always sent: when
    ``lat``/``lon`` are not both given, the configured default (Nairobi)
    is used instead.

    Returns:
        Candidates in provider order (best first). Empty for no match, an
        empty image, or any provider failure.
    """
    if not image:
        logger.info("Empty image payload; nothing to identify")
        return []

    if lat is None or lon is None:
        settings = get_settings()
        lat, lon = settings.default_lat, settings.default_lon

    try:
        payload = client.score_image(image, lat, lon)
    except (requests.RequestException, ValueError) as e:
        logger.warning("Image identification failed: %s", e)
        return []

    candidates = parse_candidates(payload)
    if not candidates:
        logger.info("No identification candidates returned")
    return candidates
