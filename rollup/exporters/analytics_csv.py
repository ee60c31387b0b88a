from __future__ import annotations

import logging
from pathlib import Path

from rollup.core.csvio import write_records_to_csv
from rollup.core.schema import AnalyticsBundle, ProjectStatistics, UserStatistics

logger = logging.getLogger(__name__)


def _flatten(row: dict) -> dict:
    # list columns are written as ';'-joined strings
    return {key: ";".join(value) if isinstance(value, list) else value for key, value in row.items()}


def export_project_statistics(path: Path, bundle: AnalyticsBundle) -> Path:
    rows = [_flatten(stats.model_dump()) for stats in bundle.projects]
    logger.info("exporting %d project rows to %s", len(rows), path)
    return write_records_to_csv(path, rows, list(ProjectStatistics.model_fields))


def export_user_statistics(path: Path, bundle: AnalyticsBundle) -> Path:
    rows = [_flatten(stats.model_dump()) for stats in bundle.users]
    logger.info("exporting %d user rows to %s", len(rows), path)
    return write_records_to_csv(path, rows, list(UserStatistics.model_fields))
