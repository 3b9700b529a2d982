"""
Command line entry point.

Usage:
    luxury-hunter presets
    luxury-hunter authenticate --brand "Louis Vuitton" --features features.json
    luxury-hunter authenticate --brand Gucci --features f.json --model-scores '{"Jackie": 0.8}' --json

`features.json` holds a FeatureBreakdown computed by the vision layer, e.g.
{"logo_quality": 0.9, "stitching_consistency": 0.8, "classifier_score": 0.93}
"""
import argparse
import asyncio
import json
import sys
from typing import List, Optional

from pydantic import ValidationError

from luxury_hunter.core.config import get_settings
from luxury_hunter.core.errors import ConfigurationError
from luxury_hunter.core.logging import get_logger, setup_logging
from luxury_hunter.evaluation.evidence import FeatureBreakdown
from luxury_hunter.pipeline.services import ItemAuthenticator
from luxury_hunter.policies.presets import load_presets

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="luxury-hunter",
        description="Luxury goods brand detection and authentication engine",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("presets", help="Print the effective decision specs as YAML")

    auth = sub.add_parser("authenticate", help="Authenticate an item from its feature scores")
    auth.add_argument("--brand", required=True, help="Brand the item claims")
    auth.add_argument("--features", required=True, help="JSON file with the feature breakdown")
    auth.add_argument("--model-scores", help="JSON object of model name -> score")
    auth.add_argument("--json", action="store_true", help="Print the full result as JSON")
    return parser


def _print_presets() -> int:
    for name, spec in sorted(load_presets().items()):
        print(f"# {name}")
        print(spec.to_yaml())
    return 0


def _authenticate(args: argparse.Namespace) -> int:
    try:
        with open(args.features, "r", encoding="utf-8") as f:
            breakdown = FeatureBreakdown.model_validate_json(f.read())
        model_scores = json.loads(args.model_scores) if args.model_scores else None
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Cannot read input: {e}")
        return 1

    result = asyncio.run(
        ItemAuthenticator().authenticate(
            args.features,
            args.brand,
            breakdown=breakdown,
            model_scores=model_scores,
        )
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(f"{result.brand} / {result.model}: {result.verdict.value}")
        for line in result.report.render():
            print(line)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = get_settings()
        setup_logging(settings.log_level)

        if args.command == "presets":
            return _print_presets()
        return _authenticate(args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
