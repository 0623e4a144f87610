#!/usr/bin/env python3
"""
Fetch points of interest from OpenStreetMap and write normalized listing files.

Usage:
    python -m destination_ingest.scripts.ingest_osm [--output DIR] [--only hotels,sports]
                                                    [--seed N] [--bbox s,w,n,e]

With no flags the full fixed sequence runs against the configured region.
Exit status: 0 all categories written, 2 some categories failed, 1 bad
configuration.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from destination_ingest.config import BoundingBox, Config, get_config, setup_logging
from destination_ingest.providers.overpass_provider import OverpassProvider
from destination_ingest.providers.utils import get_session
from destination_ingest.src.normalizers import NormalizeContext
from destination_ingest.src.pipeline import CATEGORY_NAMES, run_ingestion, select_specs, summarize
from destination_ingest.src.report import IngestionReport

logger = logging.getLogger(__name__)


def parse_categories(raw: Optional[str]) -> Optional[List[str]]:
    if not raw:
        return None
    return [name.strip().lower() for name in raw.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest OpenStreetMap listings into JSON files")
    parser.add_argument('--output', type=str, default=None,
                        help='Output directory (default: INGEST_OUTPUT_DIR or ./data/ingested)')
    parser.add_argument('--only', type=str, default=None,
                        help=f"Comma-separated subset of: {','.join(CATEGORY_NAMES)}")
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for placeholder ratings and flags (default: INGEST_RANDOM_SEED)')
    parser.add_argument('--bbox', type=str, default=None,
                        help='Bounding box south,west,north,east (default: INGEST_BBOX)')
    return parser


async def run(cfg: Config, output_dir: str, categories: Optional[List[str]],
              seed: Optional[int], bbox: BoundingBox) -> IngestionReport:
    context = NormalizeContext.from_config(cfg, seed=seed)
    async with get_session() as session:
        client = OverpassProvider.from_config(cfg.overpass, session=session)
        return await run_ingestion(
            client,
            output_dir=output_dir,
            context=context,
            categories=categories,
            bbox=bbox,
            server_timeout=cfg.overpass.server_timeout,
            report_filename=cfg.output.report_filename,
            metadata={"config": cfg.to_dict()},
        )


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    try:
        cfg = get_config()
        bbox = BoundingBox.parse(args.bbox) if args.bbox else cfg.region.bbox
        categories = parse_categories(args.only)
        select_specs(categories)
    except ValueError as e:
        print(f'Configuration error: {e}', file=sys.stderr)
        raise SystemExit(1)

    setup_logging(cfg)
    output_dir = args.output or cfg.output.directory

    report = asyncio.run(run(cfg, output_dir, categories, args.seed, bbox))

    for line in summarize(report):
        print(line)
    raise SystemExit(report.exit_code)


if __name__ == '__main__':
    main()
