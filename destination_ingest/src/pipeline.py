"""
Ingestion orchestrator.

Runs the category cycles in a fixed order:

    hotels -> restaurants -> attractions -> sports -> events -> promotions

The first four fetch from Overpass, normalize and persist; the last two come
from the synthetic generators. Each cycle is isolated: a failure is logged and
recorded in the report, its previous output file is left as it was, and the
next category still runs. Throttling belongs to the client, so there are no
sleeps here.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Union

from destination_ingest.config import BoundingBox, get_config
from destination_ingest.providers.base import Provider
from destination_ingest.providers.overpass_provider import build_query
from destination_ingest.src.normalizers import (
    NormalizeContext,
    normalize_attractions,
    normalize_hotels,
    normalize_restaurants,
    normalize_sports,
)
from destination_ingest.src.normalizers.common import SOURCE
from destination_ingest.src.persistence import save_records, save_report
from destination_ingest.src.report import (
    OPERATION_GENERATE,
    OPERATION_INGEST,
    CategoryRun,
    IngestionReport,
)
from destination_ingest.src.synthetic import generate_events, generate_promotions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorySpec:
    """How one category is produced.

    OSM categories set ``query`` (the Overpass category) and ``normalize``;
    synthetic ones set ``generate`` only.
    """
    name: str
    filename: str
    query: Optional[str] = None
    normalize: Optional[Callable[..., List[dict]]] = None
    generate: Optional[Callable[..., List[dict]]] = None

    @property
    def operation(self) -> str:
        return OPERATION_GENERATE if self.generate else OPERATION_INGEST


CATEGORY_SPECS: Sequence[CategorySpec] = (
    CategorySpec("hotels", "hotels.json", query="hotels", normalize=normalize_hotels),
    CategorySpec("restaurants", "restaurants.json", query="restaurants", normalize=normalize_restaurants),
    CategorySpec("attractions", "attractions.json", query="attractions", normalize=normalize_attractions),
    CategorySpec("sports", "sports.json", query="sports", normalize=normalize_sports),
    CategorySpec("events", "events.json", generate=generate_events),
    CategorySpec("promotions", "promotions.json", generate=generate_promotions),
)

CATEGORY_NAMES = tuple(spec.name for spec in CATEGORY_SPECS)


def select_specs(categories: Optional[Iterable[str]] = None) -> List[CategorySpec]:
    """Specs for ``categories`` in pipeline order (all of them when None).

    Raises:
        ValueError: For an unknown category name
    """
    if categories is None:
        return list(CATEGORY_SPECS)
    wanted = set(categories)
    unknown = wanted - set(CATEGORY_NAMES)
    if unknown:
        raise ValueError(f"Unknown categories: {', '.join(sorted(unknown))}")
    return [spec for spec in CATEGORY_SPECS if spec.name in wanted]


async def _run_category(
    spec: CategorySpec,
    run: CategoryRun,
    client: Provider,
    context: NormalizeContext,
    output_dir: Path,
    bbox: Optional[BoundingBox],
    server_timeout: int,
) -> None:
    if spec.generate is not None:
        records = spec.generate(context)
        processed = len(records)
        source = "synthetic"
    else:
        query = build_query(spec.query, bbox=bbox, timeout=server_timeout)
        elements = await client.search(query)
        logger.info("Fetched %d %s elements", len(elements), spec.name)
        records = spec.normalize(elements, context)
        # untagged member nodes from ``>; out skel qt;`` are geometry, not candidates
        processed = sum(1 for element in elements if element.get("tags"))
        source = SOURCE
    path = await save_records(records, spec.filename, output_dir)
    run.succeed(processed, len(records), source=source, file=str(path))


async def run_ingestion(
    client: Provider,
    *,
    output_dir: Union[str, Path],
    context: Optional[NormalizeContext] = None,
    categories: Optional[Iterable[str]] = None,
    bbox: Optional[BoundingBox] = None,
    server_timeout: Optional[int] = None,
    report_filename: str = "ingestion-report.json",
    metadata: Optional[dict] = None,
) -> IngestionReport:
    """Run every selected category cycle and write the run report.

    Args:
        client: Overpass client (anything with ``async search(query)``)
        output_dir: Directory for the category files and the report
        context: Normalization context; built from configuration when omitted
        categories: Restrict the run to these category names, order unchanged
        bbox: Search area; defaults to the configured region
        server_timeout: Overpass ``[timeout:N]``; defaults to configuration
        report_filename: Name of the report file in ``output_dir``
        metadata: Extra fields stored in the report

    Returns:
        The finished report. Category failures are reported, never raised.
    """
    specs = select_specs(categories)
    context = context or NormalizeContext.from_config()
    if server_timeout is None:
        server_timeout = get_config().overpass.server_timeout
    output_dir = Path(output_dir)

    report = IngestionReport(metadata=dict(metadata or {}))
    logger.info("Starting ingestion of %d categories into %s", len(specs), output_dir)

    for spec in specs:
        run = report.add(CategoryRun(spec.name, operation=spec.operation))
        logger.info("Processing %s", spec.name)
        try:
            await _run_category(spec, run, client, context, output_dir, bbox, server_timeout)
        except Exception as e:
            logger.exception("Category %s failed", spec.name)
            run.fail(e)
            continue
        logger.info(
            "Finished %s: %d of %d records kept",
            spec.name, run.records_successful, run.records_processed,
        )

    report.finish()
    await save_report(report.to_dict(), output_dir, report_filename)
    if report.failed_categories:
        logger.warning("Ingestion finished with failures: %s", ", ".join(report.failed_categories))
    else:
        logger.info("Ingestion finished: %d records written", report.total_records)
    return report


def summarize(report: IngestionReport) -> List[str]:
    """Human-readable summary lines for the CLI."""
    lines = []
    for run in report.runs:
        if run.succeeded:
            lines.append(f"{run.data_type}: {run.records_successful} records")
        else:
            message = run.errors[-1]["error"] if run.errors else "unknown error"
            lines.append(f"{run.data_type}: FAILED ({message})")
    lines.append(f"Total records: {report.total_records}")
    if report.failed_categories:
        lines.append(f"Failed categories: {', '.join(report.failed_categories)}")
    lines.append(f"Status: {report.status}")
    return lines
