"""
Run report for an ingestion run.

One ``CategoryRun`` per category, shaped like an ingestion-history entry so a
loader can store it next to the data it describes, and an ``IngestionReport``
that aggregates them.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_PARTIAL = "partial"

OPERATION_INGEST = "ingest"
OPERATION_GENERATE = "generate"


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


@dataclass
class CategoryRun:
    data_type: str
    operation: str = OPERATION_INGEST
    status: Optional[str] = None
    records_processed: int = 0
    records_successful: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    start_time: str = field(default_factory=utc_now)
    end_time: Optional[str] = None
    duration_ms: int = 0
    _started: float = field(default_factory=time.monotonic, init=False, repr=False)

    @property
    def records_skipped(self) -> int:
        return max(0, self.records_processed - self.records_successful)

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_SUCCESS

    def _finish(self, status: str) -> None:
        self.status = status
        self.end_time = utc_now()
        self.duration_ms = int((time.monotonic() - self._started) * 1000)

    def succeed(self, processed: int, successful: int, **metadata) -> None:
        self.records_processed = processed
        self.records_successful = successful
        self.metadata.update(metadata)
        self._finish(STATUS_SUCCESS)

    def fail(self, error: BaseException) -> None:
        self.errors.append({"error": f"{type(error).__name__}: {error}", "timestamp": utc_now()})
        self._finish(STATUS_FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dataType": self.data_type,
            "operation": self.operation,
            "status": self.status,
            "recordsProcessed": self.records_processed,
            "recordsSuccessful": self.records_successful,
            "recordsSkipped": self.records_skipped,
            "errorList": list(self.errors),
            "metadata": dict(self.metadata),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration_ms,
        }


@dataclass
class IngestionReport:
    """All category runs of one invocation, in execution order."""

    runs: List[CategoryRun] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    started_at: str = field(default_factory=utc_now)
    finished_at: Optional[str] = None

    def add(self, run: CategoryRun) -> CategoryRun:
        self.runs.append(run)
        return run

    def finish(self) -> None:
        self.finished_at = utc_now()

    @property
    def failed_categories(self) -> List[str]:
        return [run.data_type for run in self.runs if not run.succeeded]

    @property
    def status(self) -> str:
        """``success`` when every category succeeded, ``failed`` when none did, else ``partial``.

        An empty run counts as a success.
        """
        failed = len(self.failed_categories)
        if failed == 0:
            return STATUS_SUCCESS
        if failed == len(self.runs):
            return STATUS_FAILED
        return STATUS_PARTIAL

    @property
    def exit_code(self) -> int:
        return 0 if self.status == STATUS_SUCCESS else 2

    @property
    def total_records(self) -> int:
        return sum(run.records_successful for run in self.runs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "startTime": self.started_at,
            "endTime": self.finished_at,
            "totalRecords": self.total_records,
            "failedCategories": self.failed_categories,
            "metadata": dict(self.metadata),
            "categories": [run.to_dict() for run in self.runs],
        }
