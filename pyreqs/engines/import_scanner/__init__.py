"""Import scanner engine: static import extraction from Python sources."""

from pyreqs.engines.import_scanner.models import ScanResult
from pyreqs.engines.import_scanner.scanner import ImportScanner, scan_imports

__all__ = ["ImportScanner", "ScanResult", "scan_imports"]
