"""
Local User Collector

Enumerates local accounts from Win32_UserAccount.
"""

from typing import List

from .base_collector import BaseInventoryCollector
from .records import LocalUser
from ..utils import to_text


class LocalUserCollector(BaseInventoryCollector):
    """Local (non-domain) accounts, sorted by name."""

    section = "users"
    label = "local users"
    requires_wmi = True

    def collect(self) -> List[LocalUser]:
        users = [
            LocalUser(
                name=to_text(account.Name),
                full_name=to_text(account.FullName),
                enabled=not account.Disabled if account.Disabled is not None else None,
                description=to_text(account.Description),
                sid=to_text(account.SID),
            )
            for account in self.wmi_conn.Win32_UserAccount(LocalAccount=True)
        ]
        users.sort(key=lambda u: u.name.lower())
        return users
