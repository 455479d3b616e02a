"""
SysInventory - Windows Hardware and Software Inventory Report

Collects a single machine's hardware and software configuration and writes
a timestamped, human-readable text report next to the program.

Modules:
    - inventory_report: Main script orchestrating collection and output
    - collectors: One collector per report section (WMI, registry, psutil)
    - product_key: Windows product key decoding
    - report_formatter: Field lists, tables and the ordered report document
    - report_writer: Report filename construction and file output
    - utils: Configuration, logging and value helpers
"""

__version__ = "1.0.0"
__author__ = "SysInventory Contributors"
__license__ = "Apache-2.0"
