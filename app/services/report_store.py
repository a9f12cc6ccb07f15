"""Per-user report persistence on the local filesystem."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path

from app.core.enums import ReportFormat
from app.services.body_metrics import MetricsRecord
from app.services.report import render_report

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


class ReportStorageError(Exception):
    """The report could not be written."""


def safe_filename(name: str) -> str:
    """``<name with non-alphanumerics as _>_data.txt``."""
    return f"{_UNSAFE_CHARS.sub('_', name)}_data.txt"


class ReportStore:
    """Writes one file per name under ``data_dir``; a new report replaces the old one."""

    def __init__(self, data_dir: str | Path, report_format: ReportFormat = ReportFormat.JSON):
        self.data_dir = Path(data_dir)
        self.report_format = ReportFormat(report_format)

    def path_for(self, name: str) -> Path:
        return self.data_dir / safe_filename(name)

    def serialize(self, record: MetricsRecord) -> str:
        if self.report_format is ReportFormat.TEXT:
            return render_report(record)
        return json.dumps(record.to_dict(), indent=2, ensure_ascii=False)

    def save(self, record: MetricsRecord) -> Path:
        """Write the record atomically and return the final path."""
        path = self.path_for(record.name)
        content = self.serialize(record)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then replace, so readers never see a partial report
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=".tmp-", suffix=".txt")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ReportStorageError(f"Could not write report to {path}: {e}") from e
        logger.info("Saved %s report to %s", self.report_format.value, path)
        return path

    def is_writable(self) -> bool:
        """Readiness probe: the directory exists (or can be created) and accepts writes."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self.data_dir, os.W_OK)
