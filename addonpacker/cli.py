from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from addonpacker.config import APP_NAME, APP_VERSION, DEFAULT_CONFIG_NAME, PackerConfig, load_config
from addonpacker.core.manifest import build_manifest_dict, write_manifest_json
from addonpacker.core.packer import run_packer
from addonpacker.errors import ConfigError, PackerError
from addonpacker.models import PackProgress


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="addonpacker",
        description="Repackage addon packs into a curated output tree.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_NAME, help=f"JSON config file (default: {DEFAULT_CONFIG_NAME})")
    parser.add_argument("--input", help="Input root (overrides config)")
    parser.add_argument("--output", help="Output root (overrides config; wiped on every run)")
    parser.add_argument("--ignore", action="append", default=[], metavar="PACK", help="Pack name to skip (repeatable)")
    wl = parser.add_mutually_exclusive_group()
    wl.add_argument("--whitelist", dest="whitelist", action="store_true", default=None, help="Enable model whitelist")
    wl.add_argument("--no-whitelist", dest="whitelist", action="store_false", help="Disable model whitelist")
    parser.add_argument("--manifest", help="Write a JSON run summary to this path")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for per-file decisions")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def resolve_config(args: argparse.Namespace) -> PackerConfig:
    if Path(args.config).is_file():
        config = load_config(args.config)
    elif args.input and args.output:
        config = PackerConfig(input_root=args.input, output_root=args.output)
    else:
        raise ConfigError(f"No config file at {args.config}; pass --input and --output instead.")

    if args.input:
        config = replace(config, input_root=args.input)
    if args.output:
        config = replace(config, output_root=args.output)
    if args.ignore:
        config = replace(config, ignored_packs=set(config.ignored_packs) | set(args.ignore))
    if args.whitelist is not None:
        config = replace(config, model_whitelist=args.whitelist)
    return config


def _print_progress(p: PackProgress) -> None:
    if p.addon:
        print(f"- {p.addon}")
    else:
        print(f"\ntotal size - {p.total_size / 1_048_576:.2f} MB")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    current_pack = {"name": None}

    def _progress(p: PackProgress) -> None:
        if p.pack != current_pack["name"]:
            current_pack["name"] = p.pack
            print(f'processing "{p.pack}":')
        _print_progress(p)

    try:
        config = resolve_config(args)
        summaries = run_packer(config, progress_cb=_progress)
        if args.manifest:
            manifest = build_manifest_dict(APP_NAME, APP_VERSION, config, summaries)
            print(f"summary written: {write_manifest_json(manifest, args.manifest)}")
    except PackerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
