#!/usr/bin/env python3
"""
UE Data Miner - CLI

Usage:
    data-miner                          Run default miners using saved config
    data-miner run --content <dir>      Run against a Content (or JSON export) folder
    data-miner run --miners all         Run every miner, including optional ones
    data-miner list                     List available miners
    data-miner derived <class>          List blueprint classes derived from a class
    data-miner config --set key=value   Save defaults to config.json
"""

import argparse
import sys

from data_miner.core import (
    configure_logging,
    get_config_path,
    load_config,
    resolve_run_options,
    save_config_values,
)
from data_miner.errors import DataMinerError


def _open_source(options: dict):
    from data_miner.assets import open_source

    if not options["content_path"]:
        print("Error: No content path configured.")
        print()
        print("Pass one with:")
        print("  data-miner run --content /path/to/Content")
        print("or save a default with:")
        print("  data-miner config --set content_path=/path/to/Content")
        sys.exit(1)
    return open_source(options["content_path"], options["parser_path"])


def cmd_run(args):
    """Run the selected miners and write CSV + update.sql."""
    from data_miner.runner import MineRunner

    counter = configure_logging(debug=getattr(args, "debug", False) or None)
    options = resolve_run_options(args)

    if getattr(args, "save", False):
        save_config_values(
            {
                "content_path": options["content_path"],
                "output_path": options["output_path"],
                "workers": options["workers"],
                "miners": options["miners"],
            }
        )
        print(f"Saved run options to {get_config_path()}")

    try:
        source = _open_source(options)
        runner = MineRunner(options, source)
        result = runner.run()
    except DataMinerError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print()
    for miner_result in result.results:
        status = "ok" if miner_result.success else "FAILED"
        print(f"  {miner_result.name:12s} {status:6s} {miner_result.rows:,} rows")
    if result.sql_path:
        print(f"\nSQL written to {result.sql_path}")
    print(f"Warnings: {counter.warnings}, Errors: {counter.errors}")

    if getattr(args, "timing", False):
        print()
        print(runner.timer.report())

    if not result.success:
        sys.exit(1)


def cmd_list(args):
    """List available miners."""
    from data_miner.miners import list_miners

    defaults, extras = list_miners()
    print("Default miners:")
    for name in defaults:
        print(f"  {name}")
    if extras:
        print()
        print("Additional miners (run with --miners <name> or --miners all):")
        for name in extras:
            print(f"  {name}")


def cmd_derived(args):
    """Print every blueprint class derived from a class."""
    from data_miner.hierarchy import ClassHierarchyIndex

    configure_logging(debug=getattr(args, "debug", False) or None)
    options = resolve_run_options(args)

    try:
        source = _open_source(options)
        index = ClassHierarchyIndex.build(source.iter_classes())
    except DataMinerError as e:
        print(f"Error: {e}")
        sys.exit(1)

    stats = index.stats()
    print(f"Indexed {stats['classes']:,} classes ({stats['native_roots']:,} native roots)")
    print()

    derived = index.get_derived_classes(args.class_name)
    if not derived:
        print(f"No classes derive from {args.class_name}.")
        return
    for asset_class in derived:
        print(f"{asset_class.name}\t{asset_class.super_name or ''}\t{asset_class.package_path or ''}")
    print(f"\n{len(derived)} classes")


def _parse_assignment(text: str) -> tuple[str, object]:
    if "=" not in text:
        raise ValueError(f"Expected key=value, got '{text}'")
    key, value = text.split("=", 1)
    key = key.strip()
    value = value.strip()
    if value == "":
        return key, None
    if key == "workers":
        return key, int(value)
    if key == "miners":
        return key, [m.strip() for m in value.split(",") if m.strip()]
    return key, value


def cmd_config(args):
    """Show or update saved defaults."""
    if args.set:
        try:
            values = dict(_parse_assignment(item) for item in args.set)
            save_config_values(values)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(f"Updated {get_config_path()}")

    config = load_config()
    print(f"Config: {get_config_path()}")
    if not config:
        print("  (empty)")
    for key, value in config.items():
        if isinstance(value, list):
            value = ",".join(value)
        print(f"  {key} = {value}")


def _add_run_options(parser):
    parser.add_argument(
        "--content", dest="content_path", help="Content folder (.uasset) or JSON export folder"
    )
    parser.add_argument("--parser", dest="parser_path", help="Path to the AssetParser binary")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")


def main():
    parser = argparse.ArgumentParser(
        description="UE Data Miner - extract game data tables from blueprint assets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
Commands:
  run                     Run miners (default when no command is given)
  list                    Show available miners
  derived <class>         Show classes derived from <class>
  config --set key=value  Save defaults (content_path, output_path, parser_path, miners, workers)

Examples:
  data-miner run --content "D:/Game/WS/Content" --output out
  data-miner run --miners Fashion,Gift --workers 2
  data-miner derived HDaoJuWuQi
  data-miner config --set content_path=/data/json_export
""",
    )

    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run miners")
    _add_run_options(run_parser)
    run_parser.add_argument("--output", dest="output_path", help="Output folder (default: out)")
    run_parser.add_argument("--miners", help="Comma-separated miner names, or 'all'")
    run_parser.add_argument("--workers", type=int, help="Miners run in parallel (default: 4)")
    run_parser.add_argument(
        "--save", action="store_true", help="Persist effective run options to config.json"
    )
    run_parser.add_argument("--timing", action="store_true", help="Print a timing report")

    subparsers.add_parser("list", help="List available miners")

    derived_parser = subparsers.add_parser("derived", help="List derived classes")
    derived_parser.add_argument("class_name", help="Base class name, e.g. HDaoJuBase")
    _add_run_options(derived_parser)

    config_parser = subparsers.add_parser("config", help="Show or update saved defaults")
    config_parser.add_argument(
        "--set", action="append", metavar="KEY=VALUE", help="Set a config value (repeatable)"
    )

    args = parser.parse_args()

    if args.command == "list":
        cmd_list(args)
    elif args.command == "derived":
        cmd_derived(args)
    elif args.command == "config":
        cmd_config(args)
    else:
        cmd_run(args)


if __name__ == "__main__":
    main()
