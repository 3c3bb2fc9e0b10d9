"""
Check-in logger: record numeric barcode scans into a CSV store and export
them by date.
"""

__version__ = "0.1.0"
