"""
Installed Software and Update Collectors

Installed programs are read from the native and WOW6432Node uninstall keys
and merged into one de-duplicated list. Installed updates come from
Win32_QuickFixEngineering.
"""

import logging
from typing import Dict, Any, List, Optional

from . import registry
from .base_collector import BaseInventoryCollector
from .records import SoftwareEntry, HotFix
from ..utils import to_text, normalize_install_date, get_default_config

logger = logging.getLogger("sysinventory.collectors.software")

UNINSTALL_VALUES = ["DisplayName", "DisplayVersion", "Publisher", "InstallDate"]


def merge_software_entries(entries: List[SoftwareEntry]) -> List[SoftwareEntry]:
    """
    Merge entries from several uninstall keys.

    Entries without a display name are dropped, exact duplicates collapse,
    and the result is sorted by display name (case-insensitive).
    """
    unique = {entry for entry in entries if entry.display_name}
    return sorted(unique, key=lambda e: (e.display_name.lower(), e.display_version))


class InstalledSoftwareCollector(BaseInventoryCollector):
    """Programs registered for Add/Remove Programs."""

    section = "software"
    label = "installed software"

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        wmi_conn: Optional[Any] = None,
    ):
        super().__init__(config, wmi_conn)
        collection_config = self.config.get("collection") or get_default_config()["collection"]
        self.registry_paths: List[str] = list(collection_config.get("software_registry_paths", []))

    def collect(self) -> List[SoftwareEntry]:
        entries = []
        for path in self.registry_paths:
            found = self._read_uninstall_entries(path)
            logger.debug(f"{len(found)} uninstall entries under {path}")
            entries.extend(found)
        return merge_software_entries(entries)

    def _read_uninstall_entries(self, path: str) -> List[SoftwareEntry]:
        return [
            SoftwareEntry(
                display_name=to_text(values.get("DisplayName")),
                display_version=to_text(values.get("DisplayVersion")),
                publisher=to_text(values.get("Publisher")),
                install_date=normalize_install_date(to_text(values.get("InstallDate"))),
            )
            for _, values in registry.iter_subkey_values(path, UNINSTALL_VALUES)
        ]


class HotFixCollector(BaseInventoryCollector):
    """Installed Windows updates."""

    section = "updates"
    label = "Windows updates"
    requires_wmi = True

    def collect(self) -> List[HotFix]:
        return [
            HotFix(
                hotfix_id=to_text(fix.HotFixID),
                description=to_text(fix.Description),
                installed_on=to_text(fix.InstalledOn),
                installed_by=to_text(fix.InstalledBy),
            )
            for fix in self.wmi_conn.Win32_QuickFixEngineering()
        ]
