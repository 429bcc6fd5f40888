#!/usr/bin/env python
from __future__ import annotations


import sys
from pathlib import Path as _Path

# Ensure 'src' is on PYTHONPATH when running from repo root
ROOT = _Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import argparse
import json
import logging
from pathlib import Path

from envindex.config import DOMAIN_CATEGORY_KEYWORDS
from envindex.facilities import filter_facilities, load_facilities, score_facilities


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True, help="Path to facilities JSON, or an Excel/CSV measurement table.")
    ap.add_argument("--output", required=True, help="Path to write the scored facilities (JSON).")
    ap.add_argument(
        "--domain",
        action="append",
        choices=list(DOMAIN_CATEGORY_KEYWORDS),
        help="Only score facilities with data in this domain (repeatable).",
    )
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    facilities = load_facilities(args.input)
    if args.domain:
        facilities = filter_facilities(facilities, args.domain)

    results = score_facilities(facilities)

    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as fh:
        # JSON object keys must be strings; dates read from Excel are Timestamps
        json.dump({str(k): v for k, v in results.items()}, fh, ensure_ascii=False, indent=2, default=str)
    print(f"Scored {len(results)} facilities to: {args.output}")


if __name__ == "__main__":
    main()
