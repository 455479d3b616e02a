"""
Report Writer

Builds the report filename from the machine's identifying fields and the run
timestamp, and writes the finished document to disk.

Filename layout:
    {device}_{yyyy-MM-dd_HH-mm}_{manufacturer}_{model}_{serial}.txt
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

from .utils import get_default_config, get_project_root, sanitize_filename_part

logger = logging.getLogger("sysinventory.writer")


class ReportWriter:
    """
    Writes one report file per run.

    The file is overwritten without prompting if it already exists; two runs
    on the same machine within the same minute therefore share a name.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        output_dir: Optional[Path] = None,
    ):
        self.config = config or get_default_config()
        report_config = self.config.get("report", {})

        self.timestamp_format = report_config.get("timestamp_format", "%Y-%m-%d_%H-%M")
        self.encoding = report_config.get("encoding", "utf-8")
        self.output_dir = Path(output_dir) if output_dir else self._resolve_output_dir(report_config)

    @staticmethod
    def _resolve_output_dir(report_config: Dict[str, Any]) -> Path:
        configured = report_config.get("output_directory")
        if configured:
            return Path(configured).expanduser()
        return get_project_root()

    def build_filename(
        self,
        device_name: Optional[str],
        timestamp: datetime,
        manufacturer: Optional[str],
        model: Optional[str],
        serial: Optional[str],
    ) -> str:
        """
        Compose the report filename.

        Manufacturer, model and serial are sanitized; missing values become
        empty segments.
        """
        parts = [
            device_name or "",
            timestamp.strftime(self.timestamp_format),
            sanitize_filename_part(manufacturer),
            sanitize_filename_part(model),
            sanitize_filename_part(serial),
        ]
        return "_".join(parts) + ".txt"

    def write(self, text: str, filename: str) -> Path:
        """
        Write the report.

        Args:
            text: Finished report text
            filename: Name from build_filename

        Returns:
            Resolved path of the written file

        Raises:
            OSError: if the directory cannot be created or the file written
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = (self.output_dir / filename).resolve()

        with open(path, "w", encoding=self.encoding) as f:
            f.write(text)

        logger.info(f"Report written to {path}")
        return path
