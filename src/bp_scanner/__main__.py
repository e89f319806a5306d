"""
Command line entry point for bp_scanner.
Usage: python -m bp_scanner [--settings FILE] [--log-level LEVEL] COMMAND ...
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import orjson

from . import __version__
from .errors import ConfigError
from .mods.catalog import DEFAULT_CATALOG, Preset, find_preset
from .mods.mod_list import write_mod_list
from .scanner import DocumentFileLoader, ScannerService, extract_startup_settings
from .settings import AppSettings
from .tags import dump_tag_table
from .utils.logging_config import setup_logging


def _print_json(data: Any) -> None:
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))
    sys.stdout.write("\n")


def _preset_arg(name: str) -> Preset:
    preset = find_preset(name)
    if preset is None:
        names = ", ".join(p.name for p in DEFAULT_CATALOG)
        raise argparse.ArgumentTypeError(f"unknown preset '{name}' (known: {names})")
    return preset


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bp_scanner",
        description="Inspect exported blueprint JSON and find the mods it needs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="INI settings file to use instead of the native settings store.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (overrides settings).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    deps = commands.add_parser("deps", help="Print the mod dependencies of blueprint files.")
    deps.add_argument("files", nargs="+", type=Path)
    deps.add_argument("--preset", type=_preset_arg, default=None, help="Force a preset.")

    refs = commands.add_parser("refs", help="Print every game object a blueprint refers to.")
    refs.add_argument("file", type=Path)

    startup = commands.add_parser("startup", help="Print embedded startup mod settings.")
    startup.add_argument("file", type=Path)

    mod_list = commands.add_parser("mod-list", help="Write a mod-list.json for a blueprint.")
    mod_list.add_argument("file", type=Path)
    mod_list.add_argument("-o", "--output", type=Path, required=True)
    mod_list.add_argument("--preset", type=_preset_arg, default=None, help="Force a preset.")

    commands.add_parser("presets", help="List the known presets.")

    return parser.parse_args(argv)


def run_command(args: argparse.Namespace, settings: AppSettings) -> int:
    """Execute the selected command; returns the process exit code."""
    if args.command == "presets":
        _print_json(
            [
                {
                    "name": preset.name,
                    "aliases": list(preset.aliases),
                    "prefix": preset.known_prefix,
                    "mods": preset.used_mods().to_dict(),
                }
                for preset in DEFAULT_CATALOG
            ]
        )
        return 0

    if args.command == "refs":
        service = ScannerService(settings)
        document = service.loader.load(args.file)
        _print_json(service.get_references(document).to_dict())
        return 0

    if args.command == "startup":
        document = DocumentFileLoader().load(args.file)
        startup_settings = extract_startup_settings(document)
        _print_json(dump_tag_table(startup_settings) if startup_settings is not None else None)
        return 0

    if args.command == "mod-list":
        result = ScannerService(settings).scan_file(args.file, preset=args.preset)
        write_mod_list(args.output, result.dependencies, settings.scanner.include_base_mod)
        return 0

    # deps
    report = ScannerService(settings).scan_files(args.files, preset=args.preset)
    _print_json(
        {
            "results": [report.results[path].to_dict() for path in args.files if path in report.results],
            "errors": {str(path): message for path, message in report.errors.items()},
        }
    )
    return 0 if report.ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main command line entry point."""
    args = parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")
    try:
        settings = AppSettings(path=args.settings)
        setup_logging(settings, console_level=args.log_level)

        validation = settings.validate()
        for warning in validation.warnings:
            logger.warning(f"Configuration warning: {warning}")
        if not validation.is_valid:
            for error in validation.errors:
                logger.error(f"Configuration error: {error}")
            return 1

        return run_command(args, settings)

    except (ConfigError, OSError, ValueError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
