"""
Helper utilities
"""

import logging
import platform
import shutil
import sys
from typing import Dict

import colorama

from .config import ScannerConfig

_colorama_ready = False

COLOR_CODES = {
    'reset': colorama.Style.RESET_ALL,
    'red': colorama.Fore.RED,
    'green': colorama.Fore.GREEN,
    'yellow': colorama.Fore.YELLOW,
    'cyan': colorama.Fore.CYAN,
}


def setup_logging(config: ScannerConfig):
    """
    Configure logging

    Args:
        config: Scanner configuration
    """
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    log_format = '%(asctime)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format, date_format)

    # Console handler goes to stderr so it does not interleave with the report
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)

    logging.getLogger('asyncio').setLevel(logging.WARNING)


def get_color_codes(enabled: bool = True) -> Dict[str, str]:
    """
    Terminal color codes

    Args:
        enabled: False returns empty strings for every color

    Returns:
        Mapping of color name to escape sequence
    """
    global _colorama_ready

    if not enabled:
        return {k: '' for k in COLOR_CODES}

    if not _colorama_ready:
        # Translates ANSI sequences on legacy Windows consoles
        colorama.just_fix_windows_console()
        _colorama_ready = True

    return dict(COLOR_CODES)


def print_banner(colors: Dict[str, str]):
    """Print the banner at startup"""
    banner = """
    ╔══════════════════════════════════════════════════════╗
    ║                  IPv4 RANGE SCANNER                  ║
    ║        Host reachability and round-trip latency      ║
    ╚══════════════════════════════════════════════════════╝
    """
    print(f"{colors['cyan']}{banner}{colors['reset']}")


def print_settings(config: ScannerConfig, start_ip: str, end_ip: str, total: int):
    """Print the scan settings before probing starts"""
    print(f"\n{'='*60}")
    print("SCAN SETTINGS:")
    print(f"  Range: {start_ip} - {end_ip}")
    print(f"  Addresses: {total}")
    print(f"  Timeout: {config.timeout_ms} ms")
    print(f"  Concurrent probes: {config.concurrent_limit}")
    print(f"{'='*60}\n")


def validate_environment() -> bool:
    """
    Check that the ping utility is available

    Returns:
        True if ping can be found on PATH
    """
    if shutil.which('ping') is None:
        logging.getLogger(__name__).error(
            f"'ping' command not found on {platform.system()}, install it or add it to PATH"
        )
        return False
    return True
