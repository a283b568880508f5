"""External data source integrations.

Each subdirectory is one provider with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, raw HTTP helpers
    ├── parsing.py        # Provider dicts → schemas.py records
    └── {feature}.py      # Fetch functions (one per endpoint/concept)

Fetch functions are fail-soft: provider errors are logged and turned into
an empty or None result, never raised to the caller.

- gbif/          Regions (GADM), raw occurrences, backbone species
- inaturalist/   Place resolution, species counts, taxon detail, vision
"""
