"""
System, BIOS and Motherboard Collectors

Single-entity WMI queries: Win32_ComputerSystem, Win32_BIOS and
Win32_BaseBoard. The motherboard record also provides the identifying fields
used to name the report file.
"""

from datetime import datetime
from typing import List

import psutil

from .base_collector import BaseInventoryCollector
from .records import SystemSummary, BiosInfo, BoardInfo
from ..utils import to_int, to_text, parse_wmi_datetime


class SystemCollector(BaseInventoryCollector):
    """
    Computer system summary.

    Collects:
        - Device name, manufacturer and model
        - System type and domain/workgroup
        - Installed physical memory
        - Signed-in user and last boot time
    """

    section = "system"
    label = "system information"
    requires_wmi = True

    def collect(self) -> List[SystemSummary]:
        boot_time = datetime.fromtimestamp(psutil.boot_time()).strftime("%Y-%m-%d %H:%M:%S")

        records = []
        for cs in self.wmi_conn.Win32_ComputerSystem():
            records.append(SystemSummary(
                device_name=to_text(cs.Name),
                manufacturer=to_text(cs.Manufacturer),
                model=to_text(cs.Model),
                system_type=to_text(cs.SystemType),
                domain=to_text(cs.Domain),
                total_physical_memory=to_int(cs.TotalPhysicalMemory),
                user_name=to_text(cs.UserName),
                boot_time=boot_time,
            ))
        return records


class BiosCollector(BaseInventoryCollector):
    """BIOS vendor, version and release date."""

    section = "bios"
    label = "BIOS information"
    requires_wmi = True

    def collect(self) -> List[BiosInfo]:
        return [
            BiosInfo(
                manufacturer=to_text(bios.Manufacturer),
                name=to_text(bios.Name),
                version=to_text(bios.Version),
                smbios_version=to_text(bios.SMBIOSBIOSVersion),
                serial_number=to_text(bios.SerialNumber),
                release_date=parse_wmi_datetime(bios.ReleaseDate),
            )
            for bios in self.wmi_conn.Win32_BIOS()
        ]


class BaseBoardCollector(BaseInventoryCollector):
    """Motherboard manufacturer, product and serial number."""

    section = "motherboard"
    label = "motherboard information"
    requires_wmi = True

    def collect(self) -> List[BoardInfo]:
        return [
            BoardInfo(
                manufacturer=to_text(board.Manufacturer),
                product=to_text(board.Product),
                version=to_text(board.Version),
                serial_number=to_text(board.SerialNumber),
            )
            for board in self.wmi_conn.Win32_BaseBoard()
        ]
