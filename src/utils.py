"""
SysInventory Utility Functions

This module provides helper functions for:
    - Configuration management
    - Logging utilities
    - Unit conversion and value formatting
    - Filename sanitization
    - Date normalization for registry and WMI values
"""

import re
import sys
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from datetime import datetime

import yaml
from platformdirs import user_config_dir

# Configure module logger
logger = logging.getLogger("sysinventory")

APP_NAME = "sysinventory"

BYTES_PER_GB = 1024 ** 3

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_]")
_SHORT_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_WMI_DATETIME = re.compile(r"^(\d{14})")


# =============================================================================
# Configuration Management
# =============================================================================

def get_project_root() -> Path:
    """Return the directory the program runs from."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent.parent


def get_default_config_path() -> Path:
    """
    Locate the configuration file.

    Looks for configs/config.yaml next to the program first, then in the
    per-user configuration directory.

    Returns:
        Path of the first existing candidate, or the project-local path
    """
    local_path = get_project_root() / "configs" / "config.yaml"
    if local_path.exists():
        return local_path

    user_path = Path(user_config_dir(APP_NAME, appauthor=False)) / "config.yaml"
    if user_path.exists():
        return user_path

    return local_path


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Values from the file are merged over the defaults, so a partial file
    only overrides the keys it names.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = Path(config_path)

    if not config_path.exists():
        logger.debug(f"Config file not found: {config_path}. Using defaults.")
        return get_default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config: {e}")
        return get_default_config()

    if not isinstance(loaded, dict):
        return get_default_config()

    return merge_config(get_default_config(), loaded)


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``overrides`` into ``base`` and return ``base``.

    A section left empty in YAML loads as None and keeps its defaults.
    """
    for key, value in overrides.items():
        if value is None and isinstance(base.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_config(base[key], value)
        else:
            base[key] = value
    return base


def get_default_config() -> Dict[str, Any]:
    """Return default configuration values."""
    return {
        "report": {
            "output_directory": None,
            "timestamp_format": "%Y-%m-%d_%H-%M",
            "encoding": "utf-8",
        },
        "collection": {
            "wmi_namespace": "root\\cimv2",
            "software_registry_paths": [
                "SOFTWARE\\Microsoft\\Windows\\CurrentVersion\\Uninstall",
                "SOFTWARE\\WOW6432Node\\Microsoft\\Windows\\CurrentVersion\\Uninstall",
            ],
        },
        "debug": {
            "verbose": False,
            "log_level": "INFO",
            "save_debug_logs": False,
            "debug_log_file": "logs/debug.log",
        },
    }


def save_config(config: Dict[str, Any], config_path: Optional[str] = None) -> bool:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Path to save config file

    Returns:
        True if successful, False otherwise
    """
    if config_path is None:
        config_path = get_project_root() / "configs" / "config.yaml"

    config_path = Path(config_path)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
        return True
    except OSError as e:
        logger.error(f"Error saving config: {e}")
        return False


# =============================================================================
# Logging Utilities
# =============================================================================

def setup_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Set up logging for SysInventory.

    Args:
        config: Configuration dictionary

    Returns:
        Configured logger
    """
    config = config or get_default_config()
    debug_config = config.get("debug", {})

    log_level = getattr(logging, str(debug_config.get("log_level", "INFO")).upper(), logging.INFO)
    verbose = debug_config.get("verbose", False)

    logger = logging.getLogger(APP_NAME)
    logger.setLevel(log_level)

    # Console handler
    if verbose or log_level == logging.DEBUG:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler (if enabled)
    if debug_config.get("save_debug_logs", False):
        log_file = get_project_root() / debug_config.get("debug_log_file", "logs/debug.log")
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


# =============================================================================
# Value Conversion
# =============================================================================

def to_int(value: Any) -> Optional[int]:
    """
    Convert a WMI/registry value to int.

    The wmi package returns uint64 properties as strings, so sizes and
    offsets arrive as text more often than not.
    """
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_text(value: Any) -> str:
    """Render a possibly-missing value as a stripped string."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if v is not None)
    return str(value).strip()


def bytes_to_gb(size_bytes: Optional[int]) -> Optional[float]:
    """Convert a byte count to gigabytes (2^30), rounded to 2 decimals."""
    if size_bytes is None:
        return None
    return round(size_bytes / BYTES_PER_GB, 2)


def format_gb(size_bytes: Optional[int]) -> str:
    """
    Format a byte count as a gigabyte figure without trailing zeros.

    1073741824 renders as "1" and 1610612736 as "1.5".
    """
    value = bytes_to_gb(size_bytes)
    if value is None:
        return ""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def truncate(value: Optional[str], max_length: int, suffix: str = "") -> str:
    """
    Cut a string down to ``max_length`` characters.

    The suffix is appended only when the value was actually shortened.
    """
    text = value or ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + suffix


def sanitize_filename_part(value: Optional[str]) -> str:
    """Replace every character outside [A-Za-z0-9_] with a hyphen."""
    return _UNSAFE_FILENAME_CHARS.sub("-", value or "")


# =============================================================================
# Date Normalization
# =============================================================================

def normalize_install_date(value: Optional[str]) -> str:
    """
    Normalize a registry InstallDate to yyyyMMdd.

    Values shaped like M/d/yyyy are converted; a value with that shape that
    is not a real calendar date becomes an empty string. Anything else is
    returned unchanged.
    """
    text = (value or "").strip()
    match = _SHORT_US_DATE.match(text)
    if not match:
        return text

    month, day, year = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day).strftime("%Y%m%d")
    except ValueError:
        return ""


def parse_wmi_datetime(value: Optional[str]) -> str:
    """
    Render a CIM_DATETIME string (yyyymmddHHMMSS.mmmmmm+UUU) readably.

    Returns the input unchanged when it does not look like a CIM datetime.
    """
    text = to_text(value)
    match = _WMI_DATETIME.match(text)
    if not match:
        return text
    try:
        parsed = datetime.strptime(match.group(1), "%Y%m%d%H%M%S")
    except ValueError:
        return text
    return parsed.strftime("%Y-%m-%d %H:%M:%S")
