"""
Pytest Configuration and Fixtures

Provides shared fixtures and WMI/registry fakes for all tests.
"""

import pytest
import tempfile
import sys
from pathlib import Path
from unittest.mock import Mock

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.utils import get_default_config


class FakeWmiObject:
    """
    Stand-in for a wmi._wmi_object.

    Unset properties read as None, as they do for NULL WMI properties.
    """

    def __init__(self, associations=None, **props):
        self._associations = associations or {}
        self._props = props

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self._props.get(name)

    def associators(self, wmi_association_class="", wmi_result_class=""):
        return self._associations.get(wmi_association_class, [])


@pytest.fixture
def default_config():
    """Provide default configuration."""
    return get_default_config()


@pytest.fixture
def temp_output_dir():
    """Provide temporary report directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def config_with_temp_dir(temp_output_dir):
    """Provide config writing reports to a temporary directory."""
    config = get_default_config()
    config["report"]["output_directory"] = str(temp_output_dir)
    return config


@pytest.fixture
def wmi_object():
    """Factory for fake WMI instances."""
    return FakeWmiObject


@pytest.fixture
def wmi_conn():
    """Fake WMI connection; set return values per Win32 class."""
    return Mock()


@pytest.fixture
def product_key_blob():
    """A 164-byte DigitalProductId with a non-trivial key window."""
    blob = bytearray(164)
    blob[52:67] = bytes([
        0x3E, 0x91, 0x07, 0xC4, 0x5A, 0x22, 0xF0, 0x1B,
        0x66, 0x08, 0xD3, 0x4F, 0x9A, 0x10, 0x02,
    ])
    return bytes(blob)
