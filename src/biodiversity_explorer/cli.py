"""
Command-line interface for the explorer.

Thin wrappers over the datasources for browsing from a terminal and for
running the batch flows.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from biodiversity_explorer import __version__
from biodiversity_explorer.config import get_settings
from biodiversity_explorer.datasources import gbif, inaturalist
from biodiversity_explorer.flows.regions import snapshot_regions
from biodiversity_explorer.flows.verify_places import verify_places
from biodiversity_explorer.reference import GBIF_CLASSES, GBIF_KINGDOMS, INAT_TAXA, taxon_scope


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="biodiversity-explorer",
        description="Browse Kenyan counties and the species observed there",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    regions_parser = subparsers.add_parser("regions", help="List counties")
    regions_parser.add_argument("--search", default="", help="Filter by name")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a county to an iNaturalist place")
    resolve_parser.add_argument("name", help="County name, e.g. Nairobi")

    species_parser = subparsers.add_parser("species", help="Most-observed species in a county")
    species_parser.add_argument("region", help="County name")
    species_parser.add_argument(
        "--group",
        default=None,
        help=f"Taxon group ({', '.join(sorted(INAT_TAXA))})",
    )
    species_parser.add_argument("--limit", type=int, default=60, help="Page size (default: 60)")
    species_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    species_parser.add_argument("--filter", default="", help="Filter by species name")

    taxon_parser = subparsers.add_parser("taxon", help="Show one taxon's details")
    taxon_parser.add_argument("taxon_id", type=int, help="iNaturalist taxon id")

    identify_parser = subparsers.add_parser("identify", help="Identify the species in a photo")
    identify_parser.add_argument("image", type=Path, help="Image file")
    identify_parser.add_argument("--lat", type=float, default=None, help="Latitude")
    identify_parser.add_argument("--lon", type=float, default=None, help="Longitude")

    occ_parser = subparsers.add_parser("occurrences", help="GBIF occurrences in a county")
    occ_parser.add_argument("region_id", help="GADM id, e.g. KEN.30_1")
    occ_parser.add_argument("--kingdom", choices=sorted(GBIF_KINGDOMS), default=None)
    occ_parser.add_argument("--class", dest="class_name", choices=sorted(GBIF_CLASSES), default=None)
    occ_parser.add_argument("--limit", type=int, default=20, help="Page size (default: 20)")
    occ_parser.add_argument("--offset", type=int, default=0, help="Record offset (default: 0)")
    occ_parser.add_argument(
        "--any-media",
        action="store_true",
        help="Include records without images",
    )

    subparsers.add_parser("snapshot-regions", help="Store the county list for batch jobs")
    verify_parser = subparsers.add_parser(
        "verify-places", help="Check how every county resolves on iNaturalist"
    )
    verify_parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds between lookups (default: bulk_delay_seconds from settings)",
    )

    return parser


def configure_logging(debug: bool = False) -> None:
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Country: {settings.country_code} ({settings.country_qualifier})")
    return 0


def cmd_regions(args: argparse.Namespace) -> int:
    """Handle the 'regions' command."""
    regions = gbif.default_catalog().search(args.search)
    for region in regions:
        print(f"{region.id}\t{region.name}")
    print(f"Showing {len(regions)} regions.")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the 'resolve' command."""
    resolved = inaturalist.resolve_place(args.name)
    if resolved.place_id is None:
        print(f"No place found for {args.name!r}", file=sys.stderr)
        return 1
    print(f"{args.name} -> {resolved.matched_name} (place {resolved.place_id})")
    return 0


def cmd_species(args: argparse.Namespace) -> int:
    """Handle the 'species' command."""
    try:
        scope = taxon_scope(args.group)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 2
    aggregates = inaturalist.get_aggregates(args.region, scope, args.limit, args.page)
    if args.filter:
        aggregates = inaturalist.filter_aggregates(aggregates, args.filter)
    for agg in aggregates:
        group = agg.taxon.iconic_group or "-"
        print(f"{agg.observation_count:>7}  {agg.taxon.display_name}  [{group}]  #{agg.taxon.id}")
    if not aggregates:
        print("No species found. Try adjusting your filters.")
    return 0


def cmd_taxon(args: argparse.Namespace) -> int:
    """Handle the 'taxon' command."""
    detail = inaturalist.get_detail(args.taxon_id)
    if detail is None:
        print(f"Taxon {args.taxon_id} not found", file=sys.stderr)
        return 1
    print(f"Taxon: {detail.id}")
    print(f"Rank: {detail.rank or 'unknown'}")
    print(f"Group: {detail.iconic_group or 'unknown'}")
    print(f"Status: {'Extinct' if detail.is_extinct else 'Extant'}")
    if detail.summary_html:
        print(f"Summary: {detail.summary_html}")
    if detail.photo_urls:
        for url in detail.photo_urls:
            print(f"  {url}")
    else:
        print("No images available.")
    return 0


def cmd_identify(args: argparse.Namespace) -> int:
    """Handle the 'identify' command."""
    try:
        image = args.image.read_bytes()
    except OSError as e:
        print(f"Error: cannot read {args.image}: {e}", file=sys.stderr)
        return 2
    candidates = inaturalist.identify(image, args.lat, args.lon)
    if not candidates:
        print("No match found.")
        return 1
    for c in candidates:
        print(f"{round(c.confidence * 100):>3}%  {c.taxon.display_name}  #{c.taxon.id}")
    return 0


def cmd_occurrences(args: argparse.Namespace) -> int:
    """Handle the 'occurrences' command."""
    page = gbif.search_occurrences(
        args.region_id,
        kingdom=GBIF_KINGDOMS.get(args.kingdom) if args.kingdom else None,
        class_key=GBIF_CLASSES.get(args.class_name) if args.class_name else None,
        limit=args.limit,
        offset=args.offset,
        require_image=not args.any_media,
    )
    for record in page.records:
        name = record.get("vernacularName") or record.get("scientificName") or "Unknown"
        print(f"{record.get('key', '-')}\t{name}\t{record.get('eventDate', '')}")
    print(f"Showing {len(page.records)} of {page.total} records.")
    return 0


def cmd_snapshot_regions(_args: argparse.Namespace) -> int:
    """Handle the 'snapshot-regions' command."""
    count = snapshot_regions()
    return 0 if count else 1


def cmd_verify_places(args: argparse.Namespace) -> int:
    """Handle the 'verify-places' command."""
    report = verify_places(delay=args.delay)
    return 0 if report.total and not report.failures else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.debug or get_settings().debug)

    commands = {
        "info": cmd_info,
        "regions": cmd_regions,
        "resolve": cmd_resolve,
        "species": cmd_species,
        "taxon": cmd_taxon,
        "identify": cmd_identify,
        "occurrences": cmd_occurrences,
        "snapshot-regions": cmd_snapshot_regions,
        "verify-places": cmd_verify_places,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
