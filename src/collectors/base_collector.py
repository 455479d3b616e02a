"""
Base Inventory Collector Interface

All inventory collectors inherit from BaseInventoryCollector. Each one wraps
a single host query (WMI class, registry key, psutil call) and turns the
result into typed records for one report section.
"""

import sys
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field

# Windows-only WMI support
HAS_WMI = False
if sys.platform == "win32":
    try:
        import wmi
        import pythoncom
        HAS_WMI = True
    except ImportError:
        pass

logger = logging.getLogger("sysinventory.collectors")


@dataclass
class CollectionResult:
    """Outcome of one inventory query."""
    section: str
    records: List[Any] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error_message is not None

    @property
    def is_empty(self) -> bool:
        return not self.failed and not self.records


class BaseInventoryCollector(ABC):
    """
    Abstract base class for all inventory collectors.

    Subclasses set ``section`` and ``label`` and implement ``collect``.
    A WMI connection can be handed in so that one connection serves the whole
    run; collectors that need WMI and did not get one open their own.

    Example:
        class BiosCollector(BaseInventoryCollector):
            section = "bios"
            label = "BIOS information"

            def collect(self) -> List[BiosInfo]:
                return [BiosInfo(version=b.Version) for b in self.wmi_conn.Win32_BIOS()]
    """

    section: str = ""
    label: str = ""
    requires_wmi: bool = False

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        wmi_conn: Optional[Any] = None,
    ):
        """
        Initialize the collector with optional configuration.

        Args:
            config: Configuration dictionary
            wmi_conn: Shared WMI connection, or None to open one on demand
        """
        self.config = config or {}
        self._wmi_conn = wmi_conn
        self._owns_wmi = False
        self._initialized = False
        self._error_count = 0
        self._last_error: Optional[str] = None

    @property
    def is_initialized(self) -> bool:
        """Check if the collector has been successfully initialized."""
        return self._initialized

    @property
    def collector_name(self) -> str:
        """Return the name of this collector."""
        return self.__class__.__name__

    @property
    def wmi_conn(self) -> Any:
        """The WMI connection, opened lazily on first use."""
        if self._wmi_conn is None:
            self._wmi_conn = open_wmi_connection(self.config)
            self._owns_wmi = True
        return self._wmi_conn

    def initialize(self) -> bool:
        """
        Prepare the collector.

        Returns:
            True when the backing facility looks usable
        """
        if self.requires_wmi and self._wmi_conn is None and not HAS_WMI:
            self.record_error("WMI is not available on this platform")
            return False
        self._initialized = True
        return True

    @abstractmethod
    def collect(self) -> List[Any]:
        """
        Run the query and return records for this section.

        Raises whatever the underlying facility raises; callers wanting the
        best-effort behaviour use ``safe_collect``.
        """
        pass

    def safe_collect(self) -> CollectionResult:
        """
        Run ``collect`` exactly once and capture any failure.

        Returns:
            CollectionResult holding the records or the error message
        """
        if not self._initialized and not self.initialize():
            return CollectionResult(self.section, error_message=self._last_error)

        try:
            records = list(self.collect() or [])
        except Exception as e:
            self.record_error(str(e))
            logger.warning(f"Error retrieving {self.label}: {e}")
            return CollectionResult(self.section, error_message=str(e))

        logger.debug(f"{self.collector_name} collected {len(records)} record(s)")
        return CollectionResult(self.section, records=records)

    def cleanup(self) -> None:
        """Release a WMI connection this collector opened itself."""
        if self._owns_wmi:
            self._wmi_conn = None
            self._owns_wmi = False
            release_wmi()
        self._initialized = False

    def record_error(self, error_message: str) -> None:
        """
        Record an error occurrence.

        Args:
            error_message: Description of the error
        """
        self._error_count += 1
        self._last_error = error_message

    def __enter__(self):
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.cleanup()
        return False


def open_wmi_connection(config: Optional[Dict[str, Any]] = None) -> Any:
    """
    Open a WMI connection on the configured namespace.

    Raises:
        RuntimeError: if the wmi package is unavailable
    """
    if not HAS_WMI:
        raise RuntimeError("WMI is not available on this platform")

    namespace = (config or {}).get("collection", {}).get("wmi_namespace", "root\\cimv2")
    pythoncom.CoInitialize()
    try:
        return wmi.WMI(namespace=namespace)
    except Exception:
        pythoncom.CoUninitialize()
        raise


def release_wmi() -> None:
    """Balance the CoInitialize call made by open_wmi_connection."""
    if HAS_WMI:
        pythoncom.CoUninitialize()
