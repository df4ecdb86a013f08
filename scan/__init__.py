"""Scanning service package."""

from .pipeline import ImageScan, ScanSummary, scan_images
from .service import run_scan, resolve_source, export_results

__all__ = [
    "ImageScan",
    "ScanSummary",
    "scan_images",
    "run_scan",
    "resolve_source",
    "export_results",
]
