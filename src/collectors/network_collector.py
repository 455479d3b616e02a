"""
Network Adapter Collector

Lists IP-enabled adapters from Win32_NetworkAdapterConfiguration, with a
psutil-based fallback listing interfaces that are up.
"""

import socket
from typing import List

import psutil

from .base_collector import BaseInventoryCollector, HAS_WMI
from .records import NetworkAdapterInfo
from ..utils import to_text


def _as_list(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v]
    return [str(value)]


class NetworkCollector(BaseInventoryCollector):
    """
    Network configuration per adapter.

    Collects:
        - Adapter description and MAC address
        - IPv4/IPv6 addresses
        - Default gateways and DNS servers
        - DHCP state
    """

    section = "network"
    label = "network adapters"

    def collect(self) -> List[NetworkAdapterInfo]:
        if self._wmi_conn is None and not HAS_WMI:
            return self._collect_fallback()

        return [
            NetworkAdapterInfo(
                description=to_text(nic.Description),
                mac_address=to_text(nic.MACAddress),
                ip_addresses=_as_list(nic.IPAddress),
                gateways=_as_list(nic.DefaultIPGateway),
                dns_servers=_as_list(nic.DNSServerSearchOrder),
                dhcp_enabled=bool(nic.DHCPEnabled) if nic.DHCPEnabled is not None else None,
            )
            for nic in self.wmi_conn.Win32_NetworkAdapterConfiguration(IPEnabled=True)
        ]

    def _collect_fallback(self) -> List[NetworkAdapterInfo]:
        """Interfaces that are up, from psutil."""
        stats = psutil.net_if_stats()
        adapters = []

        for name, addrs in psutil.net_if_addrs().items():
            if name in stats and not stats[name].isup:
                continue

            info = NetworkAdapterInfo(description=name)
            for addr in addrs:
                if addr.family in (socket.AF_INET, socket.AF_INET6):
                    info.ip_addresses.append(addr.address)
                elif addr.family == psutil.AF_LINK:
                    info.mac_address = addr.address

            if info.ip_addresses:
                adapters.append(info)

        return adapters
