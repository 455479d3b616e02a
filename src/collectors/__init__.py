"""
Inventory Collectors Module

One collector per report section. Each wraps a single host query and returns
typed records; failures are captured by BaseInventoryCollector.safe_collect.

Available Collectors:
    - system_collector: computer system, BIOS and motherboard (WMI)
    - cpu_collector: processor (WMI, py-cpuinfo fallback)
    - memory_collector: physical memory modules (WMI)
    - disk_collector: disk drives and the disk/volume table (WMI, psutil)
    - network_collector: IP-enabled adapters (WMI, psutil fallback)
    - gpu_collector: display adapters (WMI, pynvml)
    - user_collector: local accounts (WMI)
    - os_collector: OS details and product key blob (WMI, registry)
    - software_collector: installed programs (registry) and updates (WMI)
"""

from .base_collector import BaseInventoryCollector, CollectionResult
from .system_collector import SystemCollector, BiosCollector, BaseBoardCollector
from .cpu_collector import ProcessorCollector
from .memory_collector import MemoryCollector
from .disk_collector import DiskDriveCollector, DiskVolumeCollector
from .network_collector import NetworkCollector
from .gpu_collector import GpuCollector
from .user_collector import LocalUserCollector
from .os_collector import OsCollector, ProductKeyCollector
from .software_collector import InstalledSoftwareCollector, HotFixCollector

__all__ = [
    "BaseInventoryCollector",
    "CollectionResult",
    "SystemCollector",
    "BiosCollector",
    "BaseBoardCollector",
    "ProcessorCollector",
    "MemoryCollector",
    "DiskDriveCollector",
    "DiskVolumeCollector",
    "NetworkCollector",
    "GpuCollector",
    "LocalUserCollector",
    "OsCollector",
    "ProductKeyCollector",
    "InstalledSoftwareCollector",
    "HotFixCollector",
]
