"""CLI entry point for normalizing storage locators.

Usage:
    python -m locators s3://my-bucket/data/file.nc
    python -m locators https://my-bucket.s3.us-west-2.amazonaws.com/data --json
    python -m locators --check https://example.com/bucket/x
    python -m locators --settings ./locators.yaml https://minio.internal/bucket/key
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from locators.lib.errors import LocatorError
from locators.lib.info import StorageInfo
from locators.lib.logging import setup_logging
from locators.lib.process import is_storage_locator, process_locator
from locators.lib.settings import LocatorSettings, load_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locators",
        description="Normalize S3 / Google Cloud Storage URLs to canonical path-style form",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Canonical URL plus host/region/bucket/rootkey/profile
    python -m locators s3://my-bucket/data/file.nc

    # Machine-readable output
    python -m locators https://my-bucket.s3.us-west-2.amazonaws.com/data --json

    # Only check whether a URL addresses S3-style storage
    python -m locators --check https://example.com/bucket/x

    # Region/profile defaults from a settings file
    python -m locators --settings ./locators.yaml https://minio.internal/bucket/key
        """,
    )
    parser.add_argument("urls", nargs="+", metavar="URL", help="Storage URL(s)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report whether each URL looks like S3/Google storage",
    )
    parser.add_argument("--json", action="store_true", help="Print one JSON object per URL")
    parser.add_argument("--settings", help="YAML settings file (region, profile, hosts)")
    parser.add_argument("--env-file", help="Load environment variables from a .env file")
    parser.add_argument("--region", help="Default region (overrides settings)")
    parser.add_argument("--profile", help="Credential profile (overrides settings)")
    parser.add_argument(
        "--no-aws-config",
        action="store_true",
        help="Do not consult the shared AWS config/credentials files",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs in JSON format (for log aggregation systems)",
    )
    return parser


def build_settings(args: argparse.Namespace) -> LocatorSettings:
    """Settings from ``--settings`` with command line overrides applied."""
    use_aws_config = not args.no_aws_config
    if args.settings:
        settings = load_settings(args.settings, use_aws_config=use_aws_config)
    else:
        settings = LocatorSettings(use_aws_config=use_aws_config)

    if args.region:
        settings.options["region"] = args.region
    if args.profile:
        settings.options["profile"] = args.profile
    return settings


def _report(url: str, settings: LocatorSettings, as_json: bool) -> Dict[str, Any]:
    info = StorageInfo()
    canonical = process_locator(url, info, settings=settings)
    result = {"url": url, "canonical": canonical.url, **info.to_dict()}
    if as_json:
        print(json.dumps(result))
    else:
        print(canonical.url)
        print(f"  {info.dump()}")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, json_format=args.json_logs)

    if args.env_file:
        if not load_dotenv(dotenv_path=args.env_file, override=False):
            logger.warning("No variables loaded from %s", args.env_file)

    if args.check:
        for url in args.urls:
            answer = is_storage_locator(url)
            if args.json:
                print(json.dumps({"url": url, "storage": answer}))
            else:
                print(f"{'yes' if answer else 'no'}  {url}")
        return 0

    try:
        settings = build_settings(args)
    except LocatorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    failures = 0
    for url in args.urls:
        try:
            _report(url, settings, args.json)
        except LocatorError as exc:
            failures += 1
            logger.debug("Locator rejected", extra={"error": exc.to_dict()})
            print(f"Error: {url}: {exc}", file=sys.stderr)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
