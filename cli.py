"""Lightweight CLI for Lodestone maintenance.

Usage:
    lodestone seed               # load the sample hubs and default settings
    lodestone generate h1        # generate a list from hub h1 and print it
    lodestone generate h1 -n 3   # three lists
    lodestone log-level DEBUG    # set log level in settings.toml
"""

import argparse
import logging
import re
import sys

from settings_service import SETTINGS_PATH, _load_settings, reset_settings_cache

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _quiet(args: argparse.Namespace) -> None:
    if not args.verbose:
        # Suppress library logs before config imports set up handlers
        logging.disable(logging.INFO)


def _catalog_service(args: argparse.Namespace):
    _quiet(args)
    from config import get_document_store
    from repositories.catalog_repo import CatalogRepository
    from services.catalog_service import CatalogService

    return CatalogService(CatalogRepository(get_document_store()))


def _settings_repository(args: argparse.Namespace):
    _quiet(args)
    from config import get_document_store
    from repositories.settings_repo import SettingsRepository
    from settings_service import SettingsService

    settings = SettingsService()
    return SettingsRepository(
        get_document_store(settings),
        collection=settings.settings_collection,
        document_id=settings.settings_document_id,
    )


def cmd_seed(args: argparse.Namespace) -> int:
    """Write the sample hubs and provisions, and the settings document if missing."""
    from domain.errors import LodestoneError
    from services.catalog_service import SAMPLE_HUBS

    catalog = _catalog_service(args)
    try:
        written = catalog.seed(SAMPLE_HUBS)
        stored = _settings_repository(args).ensure_defaults()
    except LodestoneError as e:
        print(f"error: {e}")
        return 1
    print(f"seeded {written} of {len(SAMPLE_HUBS)} hubs")
    print(f"deletion confirmation: {'on' if stored.show_deletion_confirmation else 'off'}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate and print lists from one hub."""
    from domain.errors import LodestoneError
    from services.catalog_service import SAMPLE_HUBS
    from services.generator_service import ListGenerator
    from settings_service import SettingsService

    catalog = _catalog_service(args)
    if SettingsService().store_backend == "memory":
        # A fresh process has an empty in-memory store
        catalog.seed(SAMPLE_HUBS)

    generator = ListGenerator.create_default()
    try:
        hub = catalog.get_hub(args.hub_id)
        for _ in range(args.count):
            generated = generator.generate(hub)
            print(f"{generated.hub_name} ({generated.total_count} items, {generated.total_value:.2f} gp)")
            for item in generated.items:
                print(f"  {item.count:>3} × {item.name:<30} {item.rarity.display_name:<10} {item.price:>10.2f} gp")
    except LodestoneError as e:
        print(f"error: {e}")
        return 1
    return 0


def cmd_log_level(args: argparse.Namespace) -> int:
    """Get or set the log level in settings.toml."""
    settings = _load_settings()
    current = settings["env"]["log_level"]

    if args.level is None:
        print(current)
        return 0

    level = args.level.upper()
    if level not in VALID_LOG_LEVELS:
        print(f"invalid level: {args.level} (expected one of {', '.join(VALID_LOG_LEVELS)})")
        return 1

    if level == current:
        print(f"already {level}")
        return 0

    content = SETTINGS_PATH.read_text()
    updated = re.sub(
        r'(log_level\s*=\s*)"[^"]*"',
        rf'\1"{level}"',
        content,
    )
    SETTINGS_PATH.write_text(updated)
    reset_settings_cache()
    print(f"{current} → {level}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lodestone", description="Lodestone CLI tools")
    sub = parser.add_subparsers(dest="command")

    seed_parser = sub.add_parser("seed", help="Load sample hubs into the document store")
    seed_parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed logs")

    gen_parser = sub.add_parser("generate", help="Generate lists from a resource hub")
    gen_parser.add_argument("hub_id", help="Resource hub id")
    gen_parser.add_argument("-n", "--count", type=int, default=1, help="Number of lists to generate")
    gen_parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed logs")

    ll_parser = sub.add_parser("log-level", help="Get or set the log level in settings.toml")
    ll_parser.add_argument("level", nargs="?", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "seed":
        return cmd_seed(args)
    if args.command == "generate":
        return cmd_generate(args)
    if args.command == "log-level":
        return cmd_log_level(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
