"""
Operating System and License Collectors

OS details come from Win32_OperatingSystem, topped up with the
CurrentVersion registry values WMI does not expose (feature update name and
update build revision). The license collector only fetches the raw
DigitalProductId; decoding lives in src.product_key.
"""

import logging
from typing import List

from . import registry
from .base_collector import BaseInventoryCollector
from .records import OsDetails, ProductKeyRecord
from ..utils import to_text, parse_wmi_datetime

logger = logging.getLogger("sysinventory.collectors.os")


class OsCollector(BaseInventoryCollector):
    """
    Windows version details.

    Collects:
        - Caption, version and build number
        - Display version (e.g. 23H2) and update build revision
        - Architecture, install date and last boot
        - Registered user and product ID
    """

    section = "os"
    label = "OS details"
    requires_wmi = True

    def collect(self) -> List[OsDetails]:
        extra = self._read_current_version()

        records = []
        for os_info in self.wmi_conn.Win32_OperatingSystem():
            records.append(OsDetails(
                caption=to_text(os_info.Caption),
                version=to_text(os_info.Version),
                build_number=to_text(os_info.BuildNumber),
                display_version=to_text(extra.get("DisplayVersion") or extra.get("ReleaseId")),
                ubr=to_text(extra.get("UBR")),
                architecture=to_text(os_info.OSArchitecture),
                install_date=parse_wmi_datetime(os_info.InstallDate),
                last_boot=parse_wmi_datetime(os_info.LastBootUpTime),
                registered_user=to_text(os_info.RegisteredUser),
                product_id=to_text(os_info.SerialNumber),
            ))
        return records

    def _read_current_version(self) -> dict:
        """Registry extras; their absence never fails the section."""
        try:
            return registry.read_values(
                registry.CURRENT_VERSION_PATH,
                ["DisplayVersion", "ReleaseId", "UBR"],
            )
        except (OSError, RuntimeError) as e:
            logger.debug(f"CurrentVersion registry values unavailable: {e}")
            return {}


class ProductKeyCollector(BaseInventoryCollector):
    """Raw DigitalProductId blob, or an empty record when it is absent."""

    section = "license"
    label = "license information"

    def collect(self) -> List[ProductKeyRecord]:
        blob = registry.read_value(registry.CURRENT_VERSION_PATH, "DigitalProductId")
        if blob is not None and not isinstance(blob, (bytes, bytearray)):
            logger.warning(f"Unexpected DigitalProductId type: {type(blob).__name__}")
            blob = None
        return [ProductKeyRecord(digital_product_id=bytes(blob) if blob else None)]
