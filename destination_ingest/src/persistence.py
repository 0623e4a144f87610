"""
Filesystem persistence for normalized category files and the run report.

Each category is written as one pretty-printed JSON array. Writes go to a
sibling temp file first and are moved into place, so a run that fails halfway
through a write never leaves a truncated category file behind.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

import aiofiles

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_output_dir(path: PathLike) -> Path:
    """Create ``path`` (and parents) if missing. Safe to call repeatedly."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


async def _write_json(payload: Any, file_path: Path) -> None:
    tmp_path = file_path.with_name(file_path.name + ".tmp")
    try:
        async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
            await f.write(json.dumps(payload, ensure_ascii=False, indent=2))
        os.replace(tmp_path, file_path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


async def save_records(records: List[Dict[str, Any]], filename: str, output_dir: PathLike) -> Path:
    """Write ``records`` to ``output_dir/filename``, replacing any previous file.

    Returns:
        Path of the written file
    """
    file_path = ensure_output_dir(output_dir) / filename
    await _write_json(list(records), file_path)
    logger.info("Saved %d records to %s", len(records), file_path)
    return file_path


async def save_report(report: Dict[str, Any], output_dir: PathLike, filename: str = "ingestion-report.json") -> Path:
    file_path = ensure_output_dir(output_dir) / filename
    await _write_json(report, file_path)
    logger.info("Saved ingestion report to %s", file_path)
    return file_path
