"""
GPU Collector

Reads Win32_VideoController. AdapterRAM is a 32-bit property and saturates
at 4 GB, so for NVIDIA cards the memory size is taken from NVML when the
library is present.
"""

import logging
from typing import Dict, List

try:
    import pynvml
    HAS_PYNVML = True
except ImportError:
    HAS_PYNVML = False

from .base_collector import BaseInventoryCollector
from .records import GpuInfo
from ..utils import to_int, to_text

logger = logging.getLogger("sysinventory.collectors.gpu")

# Value reported by cards with 4 GB or more
ADAPTER_RAM_LIMIT = 0xFFF00000


def get_nvidia_memory() -> Dict[str, int]:
    """
    Map NVIDIA GPU names to total VRAM in bytes.

    Returns an empty dict when NVML is missing or fails to initialize.
    """
    if not HAS_PYNVML:
        return {}

    memory = {}
    try:
        pynvml.nvmlInit()
    except pynvml.NVMLError as e:
        logger.debug(f"NVML unavailable: {e}")
        return {}

    try:
        for i in range(pynvml.nvmlDeviceGetCount()):
            handle = pynvml.nvmlDeviceGetHandleByIndex(i)
            name = pynvml.nvmlDeviceGetName(handle)
            if isinstance(name, bytes):
                name = name.decode("utf-8")
            memory[name.strip()] = pynvml.nvmlDeviceGetMemoryInfo(handle).total
    except pynvml.NVMLError as e:
        logger.debug(f"NVML query failed: {e}")
    finally:
        pynvml.nvmlShutdown()

    return memory


class GpuCollector(BaseInventoryCollector):
    """
    Display adapters.

    Collects:
        - Adapter name and driver version
        - Video memory
        - Video processor
        - Current resolution and refresh rate
    """

    section = "gpu"
    label = "GPU information"
    requires_wmi = True

    def collect(self) -> List[GpuInfo]:
        gpus = []
        for gpu in self.wmi_conn.Win32_VideoController():
            width = to_int(gpu.CurrentHorizontalResolution)
            height = to_int(gpu.CurrentVerticalResolution)
            ram = to_int(gpu.AdapterRAM)
            if ram is not None and ram < 0:
                ram += 2 ** 32

            gpus.append(GpuInfo(
                name=to_text(gpu.Name),
                driver_version=to_text(gpu.DriverVersion),
                adapter_ram=ram,
                video_processor=to_text(gpu.VideoProcessor),
                resolution=f"{width} x {height}" if width and height else "",
                refresh_rate=to_int(gpu.CurrentRefreshRate),
            ))

        if any(self._needs_nvml(g) for g in gpus):
            nvidia_memory = get_nvidia_memory()
            for gpu in gpus:
                if self._needs_nvml(gpu) and gpu.name in nvidia_memory:
                    gpu.adapter_ram = nvidia_memory[gpu.name]

        return gpus

    @staticmethod
    def _needs_nvml(gpu: GpuInfo) -> bool:
        return "nvidia" in gpu.name.lower() and (
            gpu.adapter_ram is None or gpu.adapter_ram >= ADAPTER_RAM_LIMIT
        )
