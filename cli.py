#!/usr/bin/env python
"""
Command-line interface for lanemerge

Usage:
    python cli.py search "A1" --output a1.json
    python cli.py process --input overpass_response.json --output report.json
    python cli.py warnings --input overpass_response.json
"""

import os
import sys
import json
import argparse

from loguru import logger

from lanemerge.config import load_config
from lanemerge.errors import LaneMergeError
from lanemerge.pipeline import LaneMergePipeline


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_pipeline(args) -> LaneMergePipeline:
    """Create a pipeline from environment config and command-line overrides"""
    config = load_config(args.env_file)
    if getattr(args, "left_hand_traffic", False):
        config.processing.left_hand_traffic = True
    if getattr(args, "ignore_cache", False):
        config.cache.ignore_cache = True
    if getattr(args, "cache_dir", None):
        config.cache.cache_dir = args.cache_dir
    if getattr(args, "endpoint", None):
        config.api.overpass_url = args.endpoint
    return LaneMergePipeline(config)


def print_summary(report):
    summary = {
        "relation_id": report.relation_id,
        "name": report.name,
        "ways": len(report.ways),
        "failed_ways": len(report.failed_ways),
        "warnings": report.warning_count,
        "lanes": sum(way.tags.lanes for way in report.ways),
    }
    print(json.dumps(summary, indent=2))


def load_response(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def cmd_search(args):
    """Fetch a relation by name or ID and resolve its lanes"""
    setup_logging(args.verbose)

    try:
        pipeline = build_pipeline(args)
        report = pipeline.run(args.term)
    except LaneMergeError as e:
        logger.error(f"Search failed: {e}")
        return 1

    if args.output:
        pipeline.save(report, args.output)
    if args.summary or not args.output:
        print_summary(report)

    logger.info(f"✓ {report.name}: {len(report.ways)} ways, {report.warning_count} warnings")
    return 0


def cmd_process(args):
    """Resolve lanes from a saved Overpass response (no network)"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        pipeline = build_pipeline(args)
        report = pipeline.process_response(load_response(args.input))
    except (LaneMergeError, ValueError) as e:
        logger.error(f"Failed to process {args.input}: {e}")
        return 1

    if args.output:
        pipeline.save(report, args.output)
    else:
        print(report.model_dump_json(indent=2))
    return 0


def cmd_warnings(args):
    """List tag warnings per way from a saved Overpass response"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        pipeline = build_pipeline(args)
        report = pipeline.process_response(load_response(args.input))
    except (LaneMergeError, ValueError) as e:
        logger.error(f"Failed to process {args.input}: {e}")
        return 1

    for way in report.ways:
        if not way.warnings:
            continue
        print(f"Way {way.id} ({way.name or 'unnamed'}):")
        for warning in way.warnings:
            print(f"  [{warning.tag}] {warning.message}")
    for way_id, error in report.failed_ways.items():
        print(f"Way {way_id}: could not process way ({error})")

    return 0 if report.warning_count == 0 else 2


def main():
    parser = argparse.ArgumentParser(
        description="lanemerge - lane inference for OpenStreetMap road relations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Search a relation by name:
    python cli.py search "A1" --output a1.json

  Search a relation by ID, left-hand traffic:
    python cli.py search 123456 --left-hand-traffic --summary

  Process a saved Overpass response:
    python cli.py process --input response.json --output report.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--env-file", help="Load settings from this .env file")
    parser.add_argument("--left-hand-traffic", action="store_true", help="Traffic drives on the left")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search a relation by name or ID")
    search_parser.add_argument("term", help="Relation name or ID")
    search_parser.add_argument("--output", "-o", help="Output JSON file")
    search_parser.add_argument("--endpoint", help="Overpass API endpoint")
    search_parser.add_argument("--cache-dir", help="Cache Overpass responses in this directory")
    search_parser.add_argument("--ignore-cache", action="store_true", help="Do not read the cache for this request")
    search_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    search_parser.set_defaults(func=cmd_search)

    # Process command
    process_parser = subparsers.add_parser("process", help="Process a saved Overpass response")
    process_parser.add_argument("--input", "-i", required=True, help="Overpass JSON response")
    process_parser.add_argument("--output", "-o", help="Output JSON file (stdout if not specified)")
    process_parser.set_defaults(func=cmd_process)

    # Warnings command
    warnings_parser = subparsers.add_parser("warnings", help="List tag warnings in a saved Overpass response")
    warnings_parser.add_argument("--input", "-i", required=True, help="Overpass JSON response")
    warnings_parser.set_defaults(func=cmd_warnings)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
