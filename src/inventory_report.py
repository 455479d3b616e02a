"""
SysInventory Report

Collects the machine's hardware and software inventory and writes one
timestamped text report next to the program.

Every section is collected once, in report order. A failing query only
affects its own section; the report is always written unless the output
file itself cannot be created.

Usage:
    python inventory_report.py [--config path/to/config.yaml] [--verbose]
"""

import sys
import argparse
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional, Tuple

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.utils import load_config, setup_logging
from src.collectors import (
    BaseInventoryCollector,
    CollectionResult,
    SystemCollector,
    BiosCollector,
    BaseBoardCollector,
    ProcessorCollector,
    MemoryCollector,
    DiskDriveCollector,
    DiskVolumeCollector,
    NetworkCollector,
    GpuCollector,
    LocalUserCollector,
    OsCollector,
    ProductKeyCollector,
    InstalledSoftwareCollector,
    HotFixCollector,
)
from src.collectors.base_collector import open_wmi_connection, release_wmi
from src.report_formatter import (
    SECTION_KEYS,
    SECTION_TITLES,
    ReportDocument,
    format_error,
    format_section,
)
from src.report_writer import ReportWriter

# Module logger
logger = logging.getLogger("sysinventory.report")

COLLECTOR_CLASSES = [
    SystemCollector,
    BiosCollector,
    BaseBoardCollector,
    ProcessorCollector,
    MemoryCollector,
    DiskDriveCollector,
    DiskVolumeCollector,
    NetworkCollector,
    GpuCollector,
    LocalUserCollector,
    OsCollector,
    ProductKeyCollector,
    InstalledSoftwareCollector,
    HotFixCollector,
]


class InventoryReport:
    """
    One inventory run.

    Owns the collectors, the shared WMI connection and the in-memory report
    for the duration of the run.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        collectors: Optional[Dict[str, BaseInventoryCollector]] = None,
        output_dir: Optional[Path] = None,
    ):
        """
        Initialize the report run.

        Args:
            config_path: Path to configuration file
            config: Configuration dictionary, used instead of config_path
            collectors: Collectors keyed by section; defaults to the full set
            output_dir: Directory for the report, overriding configuration
        """
        self.config = config or load_config(config_path)
        self.logger = setup_logging(self.config)

        self._wmi_conn = None
        self._owns_wmi = False
        self._results: Dict[str, CollectionResult] = {}

        if collectors is None:
            collectors = self._init_collectors()
        self._collectors = collectors
        self._writer = ReportWriter(self.config, output_dir)

    def _init_collectors(self) -> Dict[str, BaseInventoryCollector]:
        """Create one collector per section sharing a single WMI connection."""
        try:
            self._wmi_conn = open_wmi_connection(self.config)
            self._owns_wmi = True
        except Exception as e:
            logger.warning(f"WMI connection unavailable: {e}")
            self._wmi_conn = None

        return {cls.section: cls(self.config, self._wmi_conn) for cls in COLLECTOR_CLASSES}

    @property
    def results(self) -> Dict[str, CollectionResult]:
        return dict(self._results)

    def _collect(self, key: str) -> CollectionResult:
        collector = self._collectors.get(key)
        if collector is None:
            logger.debug(f"No collector registered for {key}")
            return CollectionResult(key)
        return collector.safe_collect()

    def _section_content(self, key: str, result: CollectionResult) -> str:
        collector = self._collectors.get(key)
        label = collector.label if collector and collector.label else SECTION_TITLES[key]

        if result.failed:
            return format_error(label, result.error_message)

        try:
            return format_section(key, result.records)
        except Exception as e:
            logger.warning(f"Failed to format {label}: {e}")
            return format_error(label, str(e))

    def build_document(self, generated_at: Optional[datetime] = None) -> ReportDocument:
        """
        Run every collector once and assemble the report.

        Returns:
            ReportDocument with all sections in report order
        """
        document = ReportDocument(generated_at=generated_at)

        for key in SECTION_KEYS:
            logger.info(f"Collecting {SECTION_TITLES[key]}")
            result = self._collect(key)
            if result.is_empty:
                logger.debug(f"No records for {SECTION_TITLES[key]}")
            self._results[key] = result
            document.add_section(key, self._section_content(key, result))

        return document

    def identifying_fields(self) -> Tuple[str, str, str, str]:
        """
        Device name and motherboard manufacturer/model/serial.

        Fields that could not be collected come back as empty strings.
        """
        device_name = ""
        system = self._results.get("system")
        if system and system.records:
            device_name = system.records[0].device_name

        manufacturer = model = serial = ""
        board = self._results.get("motherboard")
        if board and board.records:
            manufacturer = board.records[0].manufacturer
            model = board.records[0].product
            serial = board.records[0].serial_number

        return device_name, manufacturer, model, serial

    def run(self) -> Path:
        """
        Collect, format and write the report.

        Returns:
            Path of the written report

        Raises:
            OSError: if the report file cannot be written
        """
        started = datetime.now()
        logger.info("Starting inventory collection")

        try:
            document = self.build_document(generated_at=started)
            text = document.render()

            failed = [key for key, result in self.results.items() if result.failed]
            if failed:
                logger.warning(f"Sections with errors: {', '.join(failed)}")

            device_name, manufacturer, model, serial = self.identifying_fields()
            filename = self._writer.build_filename(device_name, started, manufacturer, model, serial)
            return self._writer.write(text, filename)
        finally:
            self.cleanup()

    def cleanup(self) -> None:
        """Release collectors and the shared WMI connection."""
        for collector in self._collectors.values():
            try:
                collector.cleanup()
            except Exception as e:
                logger.debug(f"Cleanup failed for {collector.collector_name}: {e}")

        if self._owns_wmi:
            self._wmi_conn = None
            self._owns_wmi = False
            release_wmi()


def main(argv=None) -> int:
    """Main entry point for the inventory report."""
    parser = argparse.ArgumentParser(
        description="SysInventory - write a hardware and software inventory report"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file",
        default=None
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.verbose:
        config["debug"]["verbose"] = True
        config["debug"]["log_level"] = "DEBUG"

    report = InventoryReport(config=config)

    try:
        path = report.run()
    except OSError as e:
        logger.error(f"Could not write report: {e}")
        print(f"Failed to write report: {e}", file=sys.stderr)
        return 1

    print(f"Report saved to: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
