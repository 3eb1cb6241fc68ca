"""CLI entry point: run the site rules against one drop and print it as JSON."""

import argparse
import json
import logging
import os
import sys

from .config import AppConfig, load_config
from .engine import RuleEngine
from .logger import setup_logger
from .models import Drop


def read_drop(args) -> Drop:
    if args.record:
        if args.record == "-":
            data = json.load(sys.stdin)
        else:
            with open(args.record) as f:
                data = json.load(f)
        drop = Drop.from_dict(data)
    elif args.url:
        drop = Drop(url=args.url)
    else:
        raise ValueError("either --url or --record is required")

    if args.domain:
        drop.domain = args.domain

    for item in args.meta:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise ValueError(f"invalid --meta value {item!r}, expected KEY=VALUE")
        drop.meta.add(name, value)

    return drop


def list_rules(engine: RuleEngine):
    print(f"{'Domain':<24} {'Rule':<16}")
    print("-" * 40)
    for domain in engine.registry.domains():
        print(f"{domain:<24} {engine.registry.dispatch(domain).name:<16}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Site rules metadata enrichment")
    parser.add_argument("--url", type=str, default=None,
                        help="URL of the fetched document; its full host is the dispatch domain, "
                             "so www.reddit.com needs --domain reddit.com")
    parser.add_argument("--domain", type=str, default=None,
                        help="Dispatch domain, matched exactly against registered rules (defaults to the URL host)")
    parser.add_argument("--meta", action="append", default=[], metavar="KEY=VALUE",
                        help="Add an upstream metadata value (repeatable)")
    parser.add_argument("--record", type=str, default=None,
                        help="JSON file holding a drop, '-' for stdin")
    parser.add_argument("--list-rules", action="store_true",
                        help="List the registered rules and exit")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to config file (default: config.yaml when present)")
    parser.add_argument("--verbose", action="store_true",
                        help="Log at debug level")
    args = parser.parse_args(argv)

    if args.config:
        config = load_config(args.config)
    elif os.path.exists("config.yaml"):
        config = load_config("config.yaml")
    else:
        config = AppConfig()

    setup_logger(config.log_dir, logging.DEBUG if args.verbose else config.log_level)

    with RuleEngine(config) as engine:
        if args.list_rules:
            list_rules(engine)
            return 0

        try:
            drop = read_drop(args)
        except (ValueError, OSError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 2

        outcome = engine.run(drop)

    print(json.dumps({"drop": drop.to_dict(), "outcome": outcome.to_dict()}, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
