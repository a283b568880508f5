"""
Prefect flows for batch work against the providers.

Flows:
- regions: Snapshot the GBIF region list into the store (90-day TTL)
- verify_places: Resolve every region against iNaturalist and report misses

Usage (local):
    python -m biodiversity_explorer.flows.regions
    python -m biodiversity_explorer.flows.verify_places

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'verify-places/default'
"""
