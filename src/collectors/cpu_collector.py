"""
Processor Collector

Reads Win32_Processor. When WMI is unavailable the processor is described
from py-cpuinfo and psutil instead, so the section still has content on a
machine where the WMI service is broken.
"""

import platform
from typing import List

import psutil

try:
    import cpuinfo
    HAS_CPUINFO = True
except ImportError:
    HAS_CPUINFO = False

from .base_collector import BaseInventoryCollector, HAS_WMI
from .records import ProcessorInfo
from ..utils import to_int, to_text

# Win32_Processor.Architecture codes
ARCHITECTURES = {
    0: "x86",
    1: "MIPS",
    2: "Alpha",
    3: "PowerPC",
    5: "ARM",
    6: "ia64",
    9: "x64",
    12: "ARM64",
}


class ProcessorCollector(BaseInventoryCollector):
    """
    CPU identification.

    Collects:
        - Model name and manufacturer
        - Physical cores and logical processors
        - Maximum clock speed
        - Socket designation and architecture
    """

    section = "processor"
    label = "processor information"

    def collect(self) -> List[ProcessorInfo]:
        if self._wmi_conn is None and not HAS_WMI:
            return [self._collect_fallback()]

        records = []
        for cpu in self.wmi_conn.Win32_Processor():
            arch = to_int(cpu.Architecture)
            records.append(ProcessorInfo(
                name=to_text(cpu.Name),
                manufacturer=to_text(cpu.Manufacturer),
                cores=to_int(cpu.NumberOfCores),
                logical_processors=to_int(cpu.NumberOfLogicalProcessors),
                max_clock_mhz=to_int(cpu.MaxClockSpeed),
                socket=to_text(cpu.SocketDesignation),
                architecture=ARCHITECTURES.get(arch, "") if arch is not None else "",
            ))
        return records

    def _collect_fallback(self) -> ProcessorInfo:
        """Describe the CPU without WMI."""
        if HAS_CPUINFO:
            cpu_data = cpuinfo.get_cpu_info()
            name = cpu_data.get("brand_raw", "")
            vendor = cpu_data.get("vendor_id_raw", "")
            arch = cpu_data.get("arch", "")
            hz = cpu_data.get("hz_advertised", [0])
            max_clock = int(hz[0] / 1_000_000) if hz and hz[0] else None
        else:
            name = platform.processor()
            vendor = ""
            arch = platform.machine()
            max_clock = None

        freq = psutil.cpu_freq()
        if max_clock is None and freq and freq.max:
            max_clock = int(freq.max)

        return ProcessorInfo(
            name=name,
            manufacturer=vendor,
            cores=psutil.cpu_count(logical=False),
            logical_processors=psutil.cpu_count(logical=True),
            max_clock_mhz=max_clock,
            architecture=arch,
        )
