"""
Asynchronous IPv4 range scanner
"""

__version__ = "1.0.0"
__author__ = "IP Scanner Team"

from .config import ScannerConfig, ConfigLoader, ConfigError
from .ip_parser import AddressRange, InvalidAddress, enumerate_range, parse, to_int, from_int
from .models import PingResult, ProbeOutcome, ScanReport
from .prober import PingProber
from .scanner import AsyncPingScanner, scan
from .reporter import ReportGenerator

__all__ = [
    'ScannerConfig',
    'ConfigLoader',
    'ConfigError',
    'AddressRange',
    'InvalidAddress',
    'enumerate_range',
    'parse',
    'to_int',
    'from_int',
    'PingResult',
    'ProbeOutcome',
    'ScanReport',
    'PingProber',
    'AsyncPingScanner',
    'scan',
    'ReportGenerator',
]
