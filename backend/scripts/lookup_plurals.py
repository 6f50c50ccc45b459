#!/usr/bin/env python3
"""Look up plural forms from the command line.

Loads the language's data contract and queries its noun database.

Run with:
    python3 -m scripts.lookup_plurals English cat
    python3 -m scripts.lookup_plurals English --values
    python3 -m scripts.lookup_plurals English --check cats
"""
import argparse
import asyncio
import json
import sys

from core.config import settings
from core.errors import Err, Ok
from core.logging import configure_logging
from engines.plurals import PluralFormResolver
from languages import load_contract


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve grammatical-number forms of nouns")
    parser.add_argument("language", help="Language identifier, e.g. English")
    parser.add_argument("noun", nargs="?", help="Singular form to resolve")
    parser.add_argument("--values", action="store_true", help="List every stored category value")
    parser.add_argument("--check", metavar="WORD", help="Check whether WORD is a stored category form")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    return parser


async def run(args: argparse.Namespace) -> int:
    contract = load_contract(args.language)
    if contract.is_err():
        print(f"❌ {contract.unwrap_err().message}", file=sys.stderr)
        return 2

    resolver = PluralFormResolver()
    if args.values:
        result = await resolver.enumerate_category_values(args.language, contract.unwrap())
    elif args.check:
        result = await resolver.is_plural(args.language, contract.unwrap(), args.check)
    else:
        result = await resolver.resolve_noun_forms(args.language, contract.unwrap(), args.noun)

    match result:
        case Ok(value):
            print(json.dumps(value, ensure_ascii=False, indent=2))
            return 0
        case Err(error):
            print(f"❌ {error}", file=sys.stderr)
            return 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not (args.noun or args.values or args.check):
        parser.error("give a noun, --values or --check WORD")

    configure_logging(
        level=args.log_level,
        json_logs=settings.LOG_JSON,
        cache_loggers=settings.is_production,
        stream=sys.stderr,
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
