"""
Inventory Record Types

Typed containers for everything the collectors gather. Every field is
optional: the host may not report it, and the formatter renders a missing
value as an empty string.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SystemSummary:
    """Win32_ComputerSystem plus boot time."""
    device_name: str = ""
    manufacturer: str = ""
    model: str = ""
    system_type: str = ""
    domain: str = ""
    total_physical_memory: Optional[int] = None
    user_name: str = ""
    boot_time: str = ""


@dataclass
class BiosInfo:
    manufacturer: str = ""
    name: str = ""
    version: str = ""
    smbios_version: str = ""
    serial_number: str = ""
    release_date: str = ""


@dataclass
class BoardInfo:
    """Motherboard identification; also feeds the report filename."""
    manufacturer: str = ""
    product: str = ""
    version: str = ""
    serial_number: str = ""


@dataclass
class ProcessorInfo:
    name: str = ""
    manufacturer: str = ""
    cores: Optional[int] = None
    logical_processors: Optional[int] = None
    max_clock_mhz: Optional[int] = None
    socket: str = ""
    architecture: str = ""


@dataclass
class MemoryModule:
    bank_label: str = ""
    device_locator: str = ""
    manufacturer: str = ""
    part_number: str = ""
    serial_number: str = ""
    capacity: Optional[int] = None
    speed: Optional[int] = None


@dataclass
class PartitionInfo:
    """A partition, joined to its logical volume when it has one."""
    drive_letter: str = ""
    volume_label: str = ""
    offset: Optional[int] = None
    size: Optional[int] = None
    free_space: Optional[int] = None


@dataclass
class DiskDrive:
    index: Optional[int] = None
    model: str = ""
    interface_type: str = ""
    media_type: str = ""
    serial_number: str = ""
    size: Optional[int] = None
    partitions: List[PartitionInfo] = field(default_factory=list)


@dataclass
class DiskVolumeRow:
    """One line of the disk/volume table."""
    disk_number: Optional[int] = None
    model: str = ""
    drive_letter: str = "N/A"
    volume_label: str = ""
    offset_gb: str = ""
    size_gb: str = ""
    free_space_gb: str = ""


@dataclass
class NetworkAdapterInfo:
    description: str = ""
    mac_address: str = ""
    ip_addresses: List[str] = field(default_factory=list)
    gateways: List[str] = field(default_factory=list)
    dns_servers: List[str] = field(default_factory=list)
    dhcp_enabled: Optional[bool] = None


@dataclass
class GpuInfo:
    name: str = ""
    driver_version: str = ""
    adapter_ram: Optional[int] = None
    video_processor: str = ""
    resolution: str = ""
    refresh_rate: Optional[int] = None


@dataclass
class LocalUser:
    name: str = ""
    full_name: str = ""
    enabled: Optional[bool] = None
    description: str = ""
    sid: str = ""


@dataclass
class OsDetails:
    caption: str = ""
    version: str = ""
    build_number: str = ""
    display_version: str = ""
    ubr: str = ""
    architecture: str = ""
    install_date: str = ""
    last_boot: str = ""
    registered_user: str = ""
    product_id: str = ""


@dataclass
class ProductKeyRecord:
    digital_product_id: Optional[bytes] = None


@dataclass(frozen=True)
class SoftwareEntry:
    """Installed program from an uninstall registry key. Hashable for merging."""
    display_name: str = ""
    display_version: str = ""
    publisher: str = ""
    install_date: str = ""


@dataclass
class HotFix:
    hotfix_id: str = ""
    description: str = ""
    installed_on: str = ""
    installed_by: str = ""
