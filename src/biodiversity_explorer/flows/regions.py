"""
Prefect flow that snapshots the region list into the data store.

Run locally:
    python -m biodiversity_explorer.flows.regions
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from prefect import flow, task

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources.gbif import RegionCatalog
from biodiversity_explorer.datasources.gbif.client import SOURCE as GBIF_SOURCE
from biodiversity_explorer.schemas import Region
from biodiversity_explorer.store import DataStore

store = DataStore(get_settings().data_dir)

REGIONS_PATH = Path("reference/regions.json")
REGIONS_TTL = timedelta(days=90)


@task(name="fetch-regions")
def fetch_regions(country_code: str | None = None) -> list[dict[str, Any]]:
    """Fetch the region list from GBIF (empty on failure)."""
    regions = RegionCatalog(country_code).list_regions()
    return [r.model_dump() for r in regions]


@task(name="save-regions")
def save_regions(regions: list[dict[str, Any]], country_code: str) -> Path:
    """Save the region list via store."""
    return store.write(
        REGIONS_PATH,
        regions,
        source=GBIF_SOURCE,
        valid_until=datetime.now(UTC) + REGIONS_TTL,
        country_code=country_code,
    )


def load_regions() -> list[Region]:
    """Regions from the snapshot if fresh, else straight from GBIF."""
    if store.is_fresh(REGIONS_PATH):
        return [Region.model_validate(r) for r in store.read(REGIONS_PATH) or []]
    return RegionCatalog().list_regions()


@flow(name="snapshot-regions", log_prints=True)
def snapshot_regions(country_code: str | None = None) -> int:
    """
    Store the region list unless the snapshot is still fresh.

    An empty fetch is not written, so a provider outage never replaces a
    good snapshot.

    Returns:
        Number of regions in the store after the run.
    """
    code = country_code or get_settings().country_code
    if store.is_fresh(REGIONS_PATH):
        print("Region snapshot is fresh, skipping fetch.")
        return len(store.read(REGIONS_PATH) or [])

    print(f"Fetching regions for {code}...")
    regions = fetch_regions(code)
    if not regions:
        print("No regions returned; keeping the existing snapshot.")
        return len(store.read(REGIONS_PATH) or [])

    path = save_regions(regions, code)
    print(f"Saved {len(regions)} regions to {path}")
    return len(regions)


if __name__ == "__main__":
    snapshot_regions()
