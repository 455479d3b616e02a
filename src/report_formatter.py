"""
Report Formatter

Turns collected records into text and assembles the report.

Two shapes are used, fixed per section:
    - field lists ("Label : value" per line) for single entities
    - column-aligned tables for multi-row data

ReportDocument holds the sections in their fixed order and renders the final
text, collapsing runs of blank lines in one pass over the whole document.
"""

import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .product_key import decode_product_key, is_product_key
from .utils import format_gb, truncate

logger = logging.getLogger("sysinventory.report")

# Only CR/LF end a line; other separators str.splitlines honours stay in content
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

NO_DATA = "No data available"
NO_MEMORY_DATA = "No physical memory modules reporting a capacity were found."

SOFTWARE_NAME_MAX = 61
SOFTWARE_VERSION_MAX = 14
SOFTWARE_PUBLISHER_MAX = 21
ELLIPSIS = "..."

# Section keys and headers, in report order
SECTIONS: List[Tuple[str, str]] = [
    ("system", "System Information"),
    ("bios", "BIOS"),
    ("motherboard", "Motherboard"),
    ("processor", "Processor"),
    ("memory", "Physical Memory"),
    ("disk_drives", "Disk Drives"),
    ("disk_volumes", "Disk / Volume Table"),
    ("network", "Network Adapters"),
    ("gpu", "GPU"),
    ("users", "Local Users"),
    ("os", "OS Details"),
    ("license", "License"),
    ("software", "Installed Software"),
    ("updates", "Windows Updates"),
]
SECTION_KEYS = [key for key, _ in SECTIONS]
SECTION_TITLES = dict(SECTIONS)

Getter = Union[str, Callable[[Any], Any]]
Column = Tuple[str, Getter]


# =============================================================================
# Value Rendering
# =============================================================================

def render_value(value: Any) -> str:
    """Render one field value as display text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if v not in (None, ""))
    return str(value).strip()


def _get(record: Any, getter: Getter) -> str:
    if callable(getter):
        return render_value(getter(record))
    if isinstance(record, dict):
        return render_value(record.get(getter))
    return render_value(getattr(record, getter, None))


def section_header(key: str) -> str:
    return f"===== {SECTION_TITLES[key]} ====="


def format_error(label: str, message: str) -> str:
    return f"Error retrieving {label}: {message}"


def normalize_blank_lines(text: str) -> str:
    """
    Collapse every run of blank lines to a single empty line.

    Whitespace-only lines count as blank. Content lines pass through
    untouched.
    """
    source = _LINE_BREAK.split(text)
    if source and source[-1] == "":
        source.pop()

    lines = []
    previous_blank = False
    for line in source:
        blank = not line.strip()
        if blank:
            if not previous_blank:
                lines.append("")
            previous_blank = True
        else:
            lines.append(line)
            previous_blank = False
    return "\n".join(lines) + "\n"


# =============================================================================
# Shapes
# =============================================================================

def format_field_list(records: Sequence[Any], fields: Sequence[Column]) -> str:
    """
    Vertical "Label : value" blocks, one per record.

    Args:
        records: Records to render (may be empty)
        fields: (label, attribute name or callable) pairs

    Returns:
        Formatted text, or NO_DATA when nothing has a value
    """
    blocks = []
    width = max((len(label) for label, _ in fields), default=0)

    for record in records:
        values = [(label, _get(record, getter)) for label, getter in fields]
        if not any(value for _, value in values):
            continue
        blocks.append("\n".join(
            f"{label.ljust(width)} : {value}".rstrip() for label, value in values
        ))

    if not blocks:
        return NO_DATA
    return "\n\n".join(blocks)


def format_table(records: Sequence[Any], columns: Sequence[Column]) -> str:
    """
    Column-aligned table with a header row and a dash rule.

    Args:
        records: Row records (may be empty)
        columns: (header, attribute name or callable) pairs

    Returns:
        Formatted text, or NO_DATA when every cell is blank
    """
    rows = [[_get(record, getter) for _, getter in columns] for record in records]
    rows = [row for row in rows if any(row)]
    if not rows:
        return NO_DATA

    headers = [header for header, _ in columns]
    widths = [
        max(len(headers[i]), *(len(row[i]) for row in rows))
        for i in range(len(headers))
    ]

    def line(cells: Sequence[str]) -> str:
        return " ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    out = [line(headers), line(["-" * w for w in widths])]
    out.extend(line(row) for row in rows)
    return "\n".join(out)


# =============================================================================
# Section Formatters
# =============================================================================

def format_system(records: Sequence[Any]) -> str:
    return format_field_list(records, [
        ("Device Name", "device_name"),
        ("Manufacturer", "manufacturer"),
        ("Model", "model"),
        ("System Type", "system_type"),
        ("Domain", "domain"),
        ("Total Physical Memory (GB)", lambda r: format_gb(r.total_physical_memory)),
        ("Logged-on User", "user_name"),
        ("Last Boot", "boot_time"),
    ])


def format_bios(records: Sequence[Any]) -> str:
    return format_field_list(records, [
        ("Manufacturer", "manufacturer"),
        ("Name", "name"),
        ("Version", "version"),
        ("SMBIOS BIOS Version", "smbios_version"),
        ("Serial Number", "serial_number"),
        ("Release Date", "release_date"),
    ])


def format_motherboard(records: Sequence[Any]) -> str:
    return format_field_list(records, [
        ("Manufacturer", "manufacturer"),
        ("Product", "product"),
        ("Version", "version"),
        ("Serial Number", "serial_number"),
    ])


def format_processor(records: Sequence[Any]) -> str:
    return format_field_list(records, [
        ("Name", "name"),
        ("Manufacturer", "manufacturer"),
        ("Cores", "cores"),
        ("Logical Processors", "logical_processors"),
        ("Max Clock Speed (MHz)", "max_clock_mhz"),
        ("Socket", "socket"),
        ("Architecture", "architecture"),
    ])


def format_memory(records: Sequence[Any]) -> str:
    """Memory module table, or a fixed message when no module reports a size."""
    if not any(module.capacity for module in records):
        return NO_MEMORY_DATA

    table = format_table(records, [
        ("Bank", "bank_label"),
        ("Slot", "device_locator"),
        ("Manufacturer", "manufacturer"),
        ("Part Number", "part_number"),
        ("Serial Number", "serial_number"),
        ("Capacity (GB)", lambda m: format_gb(m.capacity)),
        ("Speed (MHz)", "speed"),
    ])
    total = sum(module.capacity or 0 for module in records)
    return f"{table}\n\nTotal Installed Memory (GB): {format_gb(total)}"


def format_disk_drives(records: Sequence[Any]) -> str:
    return format_table(records, [
        ("Disk", "index"),
        ("Model", "model"),
        ("Interface", "interface_type"),
        ("Media Type", "media_type"),
        ("Serial Number", "serial_number"),
        ("Size (GB)", lambda d: format_gb(d.size)),
    ])


def format_disk_volumes(records: Sequence[Any]) -> str:
    return format_table(records, [
        ("Disk", "disk_number"),
        ("Model", "model"),
        ("Drive", "drive_letter"),
        ("Volume Label", "volume_label"),
        ("Offset (GB)", "offset_gb"),
        ("Size (GB)", "size_gb"),
        ("Free Space (GB)", "free_space_gb"),
    ])


def format_network(records: Sequence[Any]) -> str:
    return format_field_list(records, [
        ("Description", "description"),
        ("MAC Address", "mac_address"),
        ("IP Addresses", "ip_addresses"),
        ("Default Gateways", "gateways"),
        ("DNS Servers", "dns_servers"),
        ("DHCP Enabled", "dhcp_enabled"),
    ])


def format_gpu(records: Sequence[Any]) -> str:
    return format_field_list(records, [
        ("Name", "name"),
        ("Driver Version", "driver_version"),
        ("Video Memory (GB)", lambda g: format_gb(g.adapter_ram)),
        ("Video Processor", "video_processor"),
        ("Resolution", "resolution"),
        ("Refresh Rate (Hz)", "refresh_rate"),
    ])


def format_users(records: Sequence[Any]) -> str:
    return format_table(records, [
        ("Name", "name"),
        ("Full Name", "full_name"),
        ("Enabled", "enabled"),
        ("Description", "description"),
        ("SID", "sid"),
    ])


def format_os(records: Sequence[Any]) -> str:
    return format_field_list(records, [
        ("Caption", "caption"),
        ("Version", "version"),
        ("Build Number", "build_number"),
        ("Display Version", "display_version"),
        ("Update Build Revision", "ubr"),
        ("Architecture", "architecture"),
        ("Install Date", "install_date"),
        ("Last Boot", "last_boot"),
        ("Registered User", "registered_user"),
        ("Product ID", "product_id"),
    ])


def format_license(records: Sequence[Any]) -> str:
    blob = records[0].digital_product_id if records else None
    result = decode_product_key(blob)
    if is_product_key(result):
        return f"Product Key: {result}"
    return result


def format_software(records: Sequence[Any]) -> str:
    return format_table(records, [
        ("Name", lambda s: truncate(s.display_name, SOFTWARE_NAME_MAX, ELLIPSIS)),
        ("Version", lambda s: truncate(s.display_version, SOFTWARE_VERSION_MAX)),
        ("Publisher", lambda s: truncate(s.publisher, SOFTWARE_PUBLISHER_MAX)),
        ("Install Date", "install_date"),
    ])


def format_updates(records: Sequence[Any]) -> str:
    return format_table(records, [
        ("HotFix ID", "hotfix_id"),
        ("Description", "description"),
        ("Installed On", "installed_on"),
        ("Installed By", "installed_by"),
    ])


FORMATTERS: Dict[str, Callable[[Sequence[Any]], str]] = {
    "system": format_system,
    "bios": format_bios,
    "motherboard": format_motherboard,
    "processor": format_processor,
    "memory": format_memory,
    "disk_drives": format_disk_drives,
    "disk_volumes": format_disk_volumes,
    "network": format_network,
    "gpu": format_gpu,
    "users": format_users,
    "os": format_os,
    "license": format_license,
    "software": format_software,
    "updates": format_updates,
}


def format_section(key: str, records: Sequence[Any]) -> str:
    """Render the body of one section from its records."""
    return FORMATTERS[key](records)


# =============================================================================
# Document
# =============================================================================

class ReportDocument:
    """
    Ordered section builder for one report.

    Sections must be added in report order, each exactly once. Once added a
    section cannot be changed; ``render`` joins everything and normalizes
    blank lines.
    """

    def __init__(self, generated_at: Optional[datetime] = None):
        self.generated_at = generated_at
        self._sections: List[Tuple[str, str]] = []

    @property
    def section_keys(self) -> List[str]:
        return [key for key, _ in self._sections]

    def add_section(self, key: str, content: str) -> None:
        """
        Append a section.

        Raises:
            ValueError: for an unknown, repeated or out-of-order section
        """
        if key not in SECTION_TITLES:
            raise ValueError(f"Unknown report section: {key}")
        if key in self.section_keys:
            raise ValueError(f"Section already added: {key}")
        if self._sections:
            last = SECTION_KEYS.index(self._sections[-1][0])
            if SECTION_KEYS.index(key) < last:
                raise ValueError(f"Section {key} is out of order")

        self._sections.append((key, content))

    def missing_sections(self) -> List[str]:
        present = set(self.section_keys)
        return [key for key in SECTION_KEYS if key not in present]

    def render(self) -> str:
        """
        Join all sections into the final report text.

        Raises:
            ValueError: if any section has not been added
        """
        missing = self.missing_sections()
        if missing:
            raise ValueError(f"Report is missing sections: {', '.join(missing)}")

        parts = []
        if self.generated_at is not None:
            stamp = self.generated_at.strftime("%Y-%m-%d %H:%M:%S")
            parts.append(f"System Inventory Report - generated {stamp}\n")

        for key, content in self._sections:
            parts.append(f"{section_header(key)}\n\n{content}\n")

        return normalize_blank_lines("\n\n".join(parts))
