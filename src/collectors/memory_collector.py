"""
Physical Memory Collector

Lists installed memory modules from Win32_PhysicalMemory.
"""

from typing import List

from .base_collector import BaseInventoryCollector
from .records import MemoryModule
from ..utils import to_int, to_text


class MemoryCollector(BaseInventoryCollector):
    """One record per populated memory slot."""

    section = "memory"
    label = "physical memory"
    requires_wmi = True

    def collect(self) -> List[MemoryModule]:
        return [
            MemoryModule(
                bank_label=to_text(module.BankLabel),
                device_locator=to_text(module.DeviceLocator),
                manufacturer=to_text(module.Manufacturer),
                part_number=to_text(module.PartNumber),
                serial_number=to_text(module.SerialNumber),
                capacity=to_int(module.Capacity),
                speed=to_int(module.Speed),
            )
            for module in self.wmi_conn.Win32_PhysicalMemory()
        ]
