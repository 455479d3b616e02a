"""
Disk Collectors

Physical disk inventory and the disk-to-volume table that ties each disk to
the lettered volumes living on it.
"""

import logging
from typing import List, Iterable, Optional

import psutil

from .base_collector import BaseInventoryCollector
from .records import DiskDrive, PartitionInfo, DiskVolumeRow
from ..utils import to_int, to_text, format_gb

logger = logging.getLogger("sysinventory.collectors.disk")

NO_LETTER = "N/A"
NO_USABLE_PARTITIONS = "no usable partitions"


def build_disk_volume_rows(disks: Iterable[DiskDrive]) -> List[DiskVolumeRow]:
    """
    Join disks to their lettered partitions.

    Disks are visited in ascending index order and their partitions in
    ascending offset order. Partitions without a drive letter are skipped;
    a disk left with none gets a single placeholder row.
    """
    rows = []
    ordered = sorted(disks, key=lambda d: (d.index is None, d.index if d.index is not None else 0))

    for disk in ordered:
        lettered = [p for p in disk.partitions if p.drive_letter]
        lettered.sort(key=lambda p: p.offset if p.offset is not None else 0)

        if not lettered:
            rows.append(DiskVolumeRow(
                disk_number=disk.index,
                model=disk.model,
                drive_letter=NO_LETTER,
                volume_label=NO_USABLE_PARTITIONS,
            ))
            continue

        for part in lettered:
            rows.append(DiskVolumeRow(
                disk_number=disk.index,
                model=disk.model,
                drive_letter=part.drive_letter,
                volume_label=part.volume_label,
                offset_gb=format_gb(part.offset),
                size_gb=format_gb(part.size),
                free_space_gb=format_gb(part.free_space),
            ))

    return rows


class DiskDriveCollector(BaseInventoryCollector):
    """Physical disks from Win32_DiskDrive."""

    section = "disk_drives"
    label = "disk drives"
    requires_wmi = True

    def collect(self) -> List[DiskDrive]:
        disks = [_disk_from_wmi(disk) for disk in self.wmi_conn.Win32_DiskDrive()]
        disks.sort(key=lambda d: (d.index is None, d.index if d.index is not None else 0))
        return disks


class DiskVolumeCollector(BaseInventoryCollector):
    """
    Disk/volume join.

    Walks Win32_DiskDrive -> Win32_DiskPartition -> Win32_LogicalDisk and
    returns DiskVolumeRow records ready for the table.
    """

    section = "disk_volumes"
    label = "disk volume table"
    requires_wmi = True

    def collect(self) -> List[DiskVolumeRow]:
        disks = []
        for wmi_disk in self.wmi_conn.Win32_DiskDrive():
            disk = _disk_from_wmi(wmi_disk)
            for partition in wmi_disk.associators("Win32_DiskDriveToDiskPartition"):
                disk.partitions.extend(self._partition_volumes(partition))
            disks.append(disk)
        return build_disk_volume_rows(disks)

    def _partition_volumes(self, partition) -> List[PartitionInfo]:
        offset = to_int(partition.StartingOffset)
        size = to_int(partition.Size)

        volumes = []
        for logical in partition.associators("Win32_LogicalDiskToPartition"):
            letter = to_text(logical.DeviceID)
            volumes.append(PartitionInfo(
                drive_letter=letter,
                volume_label=to_text(logical.VolumeName),
                offset=offset,
                size=size,
                free_space=self._free_space(letter, logical.FreeSpace),
            ))

        if not volumes:
            volumes.append(PartitionInfo(offset=offset, size=size))
        return volumes

    @staticmethod
    def _free_space(letter: str, reported) -> Optional[int]:
        free = to_int(reported)
        if free is not None or not letter:
            return free
        try:
            return psutil.disk_usage(letter + "\\").free
        except (PermissionError, OSError) as e:
            logger.debug(f"Free space unavailable for {letter}: {e}")
            return None


def _disk_from_wmi(disk) -> DiskDrive:
    return DiskDrive(
        index=to_int(disk.Index),
        model=to_text(disk.Model),
        interface_type=to_text(disk.InterfaceType),
        media_type=to_text(disk.MediaType),
        serial_number=to_text(disk.SerialNumber),
        size=to_int(disk.Size),
    )
