"""
Registry Access Helpers

Thin wrappers over winreg for the HKEY_LOCAL_MACHINE reads the collectors
need. Keys are opened with KEY_WOW64_64KEY so that a 32-bit interpreter
still sees the native view.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

try:
    import winreg
    HAS_WINREG = True
except ImportError:
    HAS_WINREG = False

CURRENT_VERSION_PATH = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion"


def _require_winreg() -> None:
    if not HAS_WINREG:
        raise RuntimeError("The Windows registry is not available on this platform")


def _access() -> int:
    return winreg.KEY_READ | winreg.KEY_WOW64_64KEY


def read_value(path: str, name: str) -> Optional[Any]:
    """
    Read one value under HKLM.

    Returns:
        The value, or None when the key or value does not exist
    """
    _require_winreg()
    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, path, 0, _access()) as key:
            value, _ = winreg.QueryValueEx(key, name)
            return value
    except FileNotFoundError:
        return None


def read_values(path: str, names: List[str]) -> Dict[str, Any]:
    """Read several values from one key; missing ones map to None."""
    _require_winreg()
    values = {name: None for name in names}
    with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, path, 0, _access()) as key:
        for name in names:
            try:
                values[name], _ = winreg.QueryValueEx(key, name)
            except FileNotFoundError:
                continue
    return values


def iter_subkey_values(path: str, names: List[str]) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """
    Yield (subkey name, values) for every subkey of an HKLM key.

    A missing parent key yields nothing.
    """
    _require_winreg()
    try:
        root = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, path, 0, _access())
    except FileNotFoundError:
        return

    with root:
        index = 0
        while True:
            try:
                subkey = winreg.EnumKey(root, index)
            except OSError:
                break
            index += 1

            try:
                values = read_values(f"{path}\\{subkey}", names)
            except OSError:
                continue
            yield subkey, values
