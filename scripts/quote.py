#!/usr/bin/env python
"""
Print a quote and its pricing trace.

Usage:
    python scripts/quote.py 5000 5000
    python scripts/quote.py 20000 15000 villages:3 custom_caves
    python scripts/quote.py 1000 1000 --adjustable --days 10
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from landscape_calculator.config.settings import PricingPolicy, Settings
from landscape_calculator.engine import PricingEngine
from landscape_calculator.services.session import QuoteSession


def main():
    parser = argparse.ArgumentParser(description="Quote a custom landscape map")
    parser.add_argument('width')
    parser.add_argument('length')
    parser.add_argument('features', nargs='*', help="feature keys, optionally key:quantity")
    parser.add_argument('--per-feature-days', action='store_true', help="count feature days once per feature")
    parser.add_argument('--adjustable', action='store_true', help="use the adjustable delivery model")
    parser.add_argument('--days', type=int, help="chosen delivery days (with --adjustable)")
    args = parser.parse_args()

    policy = PricingPolicy(
        day_policy='per_feature' if args.per_feature_days else 'per_unit',
        delivery_model='adjustable' if args.adjustable else 'estimate',
    )
    session = QuoteSession(engine=PricingEngine(Settings.load(pricing=policy)))

    session.set_size_text('width', args.width)
    session.set_size_text('length', args.length)

    for item in args.features:
        key, _, qty = item.partition(':')
        try:
            session.set_feature(key, enabled=True, quantity=qty or 1)
        except KeyError:
            print(f"ERROR: Unknown feature '{key}'. Available: {', '.join(session.catalog.keys())}")
            sys.exit(1)

    if args.days is not None:
        session.set_delivery_days(args.days)

    print(session.result.get_trace_text())
    for warning in session.result.warnings:
        print(f"WARNING: {warning}")
    print()
    print(session.summarize(session.sequence.peek()).to_text())


if __name__ == "__main__":
    main()
