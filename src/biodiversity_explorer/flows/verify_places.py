"""
Prefect flow that checks how every region resolves to an iNaturalist place.

The name join between GBIF and iNaturalist is a heuristic (see
``datasources/inaturalist/places.py``). This flow resolves all regions one
by one, pausing between calls to stay under iNaturalist's informal rate
limit, and writes a report listing regions that need a place override.

Run locally:
    python -m biodiversity_explorer.flows.verify_places
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import requests
from prefect import flow, task

from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources.inaturalist import PlaceResolver
from biodiversity_explorer.datasources.inaturalist.client import SOURCE as INAT_SOURCE
from biodiversity_explorer.flows.regions import load_regions
from biodiversity_explorer.schemas import Region
from biodiversity_explorer.store import DataStore

store = DataStore(get_settings().data_dir)

REPORT_PATH = Path("derived/place_verification.json")

# =============================================================================
# Data Model
# =============================================================================


@dataclass
class PlaceCheck:
    """How one region resolved."""

    region_id: str
    region_name: str
    place_id: str | None = None
    matched_name: str | None = None
    error: str | None = None
    overridden: bool = False

    @property
    def ok(self) -> bool:
        return self.place_id is not None


@dataclass
class PlaceVerificationReport:
    """Resolution outcome for every region."""

    verified: list[PlaceCheck] = field(default_factory=list)
    failures: list[PlaceCheck] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.verified) + len(self.failures)

    def add(self, check: PlaceCheck) -> None:
        (self.verified if check.ok else self.failures).append(check)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "verified": [asdict(c) for c in self.verified],
            "failures": [asdict(c) for c in self.failures],
        }


# =============================================================================
# Tasks
# =============================================================================


def check_region(resolver: PlaceResolver, region: Region) -> PlaceCheck:
    """
    Resolve one region the way ``PlaceResolver.resolve`` does.

    Overrides win without a lookup. Otherwise the autocomplete candidates
    are fetched directly so a transport error is kept in the report
    instead of being swallowed.
    """
    check = PlaceCheck(region_id=region.id, region_name=region.name)
    query = region.name.strip()
    if query in resolver.overrides:
        check.place_id = str(resolver.overrides[query])
        check.overridden = True
        return check
    try:
        candidates = resolver.candidates(query)
    except (requests.RequestException, ValueError) as e:
        check.error = str(e)
        return check
    choice = resolver.strategy.choose(query, candidates)
    if choice is not None:
        check.place_id = choice.id
        check.matched_name = choice.display_name or choice.name
    return check


@task(name="check-regions")
def check_regions(
    regions: list[Region],
    resolver: PlaceResolver | None = None,
    delay: float | None = None,
) -> PlaceVerificationReport:
    """Resolve regions sequentially with a fixed pause between calls."""
    resolver = resolver or PlaceResolver()
    delay = get_settings().bulk_delay_seconds if delay is None else delay
    report = PlaceVerificationReport()
    for i, region in enumerate(regions):
        if i and delay > 0:
            time.sleep(delay)
        check = check_region(resolver, region)
        if check.error:
            print(f"   ERROR: {region.name!r} -> request failed: {check.error}")
        elif not check.ok:
            print(f"   FAIL: {region.name!r} -> no match found")
        report.add(check)
    return report


@task(name="save-place-verification")
def save_report(report: PlaceVerificationReport) -> Path:
    """Save the verification report via store."""
    return store.write(REPORT_PATH, report.to_dict(), source=INAT_SOURCE)


@flow(name="verify-places", log_prints=True)
def verify_places(delay: float | None = None) -> PlaceVerificationReport:
    """Resolve every region and store a report of the misses."""
    regions = load_regions()
    print(f"Found {len(regions)} regions to check.")

    report = check_regions(regions, delay=delay)
    path = save_report(report)

    print(f"Verified: {len(report.verified)}/{report.total}")
    print(f"Failures: {len(report.failures)}/{report.total}")
    if report.failures:
        print("Regions needing a place override:")
        for check in report.failures:
            print(f"- {check.region_name!r} (GID: {check.region_id})")
    print(f"Report saved to {path}")
    return report


if __name__ == "__main__":
    verify_places()
