"""
Command line entry point of the IP range scanner
"""

import argparse
import asyncio
import logging
import sys
from typing import Callable, Optional, Sequence

from .config import ConfigLoader, ConfigError
from .ip_parser import AddressRange, InvalidAddress, from_int, parse
from .reporter import ReportGenerator
from .scanner import AsyncPingScanner
from .utils import (
    setup_logging,
    get_color_codes,
    print_banner,
    print_settings,
    validate_environment,
)

logger = logging.getLogger(__name__)

InputFunc = Callable[[str], str]


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='ip-scanner',
        description='Ping every address of an IPv4 range and report which hosts respond',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ip-scanner                                   (interactive)
  ip-scanner -s 192.168.1.1 -e 192.168.1.254
  ip-scanner -s 10.0.0.1 -e 10.0.3.255 -c 200 -t 500 --export --hide-offline
  ip-scanner --init-config                     (write scanner_config.yaml)
        """
    )

    parser.add_argument('--start', '-s', help='First address of the range')
    parser.add_argument('--end', '-e', help='Last address of the range')
    parser.add_argument('--concurrency', '-c', type=int, dest='concurrent_limit',
                        help='Maximum probes in flight (default: 50)')
    parser.add_argument('--timeout', '-t', type=int, dest='timeout_ms',
                        help='Per-probe timeout in milliseconds (default: 1000)')
    parser.add_argument('--config', help='Configuration file (YAML or JSON)')

    export_group = parser.add_mutually_exclusive_group()
    export_group.add_argument('--export', dest='export', action='store_const', const=True,
                              help='Export results without asking')
    export_group.add_argument('--no-export', dest='export', action='store_const', const=False,
                              help='Do not export results')
    parser.add_argument('--export-dir', help='Directory for exported results')

    offline_group = parser.add_mutually_exclusive_group()
    offline_group.add_argument('--show-offline', dest='show_offline', action='store_const', const=True,
                               help='List offline hosts without asking')
    offline_group.add_argument('--hide-offline', dest='show_offline', action='store_const', const=False,
                               help='Do not list offline hosts')

    parser.add_argument('--quiet', '-q', dest='show_progress', action='store_const', const=False,
                        help='No live progress output')
    parser.add_argument('--no-color', dest='use_color', action='store_const', const=False,
                        help='Disable colored output')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING, ERROR or CRITICAL')
    parser.add_argument('--log-file', help='Also write the log to this file')
    parser.add_argument('--init-config', nargs='?', const='scanner_config.yaml', metavar='PATH',
                        help='Write the default configuration and exit')

    return parser.parse_args(argv)


def prompt_address(prompt: str, default: str, input_func: InputFunc = input) -> str:
    """
    Ask for an address until a valid one is entered

    Args:
        prompt: Prompt text
        default: Address used when the user just presses Enter
        input_func: Source of user input

    Returns:
        Normalized dotted-decimal address
    """
    while True:
        try:
            text = input_func(prompt).strip()
        except EOFError:
            text = ""

        if not text:
            text = default
            print(f"Using default: {text}")

        try:
            return from_int(parse(text))
        except InvalidAddress:
            print("Invalid IP address. Try again.")


def ask_yes_no(question: str, input_func: InputFunc = input) -> bool:
    """y/n question, anything but 'y' means no"""
    try:
        answer = input_func(f"{question} (y/n): ")
    except EOFError:
        return False
    return answer.strip().lower() in ('y', 'yes')


def main(argv: Optional[Sequence[str]] = None, input_func: InputFunc = input, prober=None) -> int:
    """
    Run one interactive or scripted scan

    Returns:
        Process exit code
    """
    args = parse_arguments(argv)

    if args.init_config:
        path = ConfigLoader.save_default(args.init_config)
        print(f"Default configuration written to {path}")
        return 0

    overrides = {
        "timeout_ms": args.timeout_ms,
        "concurrent_limit": args.concurrent_limit,
        "export": args.export,
        "export_dir": args.export_dir,
        "show_offline": args.show_offline,
        "show_progress": args.show_progress,
        "use_color": args.use_color,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }

    try:
        config = ConfigLoader.load(args.config, overrides=overrides)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config)
    logger.debug(f"Effective configuration: {config.to_dict()}")
    colors = get_color_codes(config.use_color)
    print_banner(colors)

    if prober is None and not validate_environment():
        return 1

    try:
        if args.start:
            start_ip = from_int(parse(args.start))
        else:
            start_ip = prompt_address("Enter start IP (e.g. 192.168.1.1): ", config.start_ip, input_func)
        if args.end:
            end_ip = from_int(parse(args.end))
        else:
            end_ip = prompt_address("Enter end IP (e.g. 192.168.1.254): ", config.end_ip, input_func)
    except InvalidAddress as e:
        print(f"{colors['red']}{e}{colors['reset']}", file=sys.stderr)
        return 1

    address_range = AddressRange.from_text(start_ip, end_ip)
    print_settings(config, address_range.first, address_range.last, len(address_range))
    print("This may take a while...\n")

    reporter = ReportGenerator(colors)
    on_outcome = None
    if config.show_progress:
        def on_outcome(outcome):
            print(reporter.format_progress(outcome), end="", flush=True)

    scanner = AsyncPingScanner(config, prober=prober, on_outcome=on_outcome)
    try:
        report = asyncio.run(scanner.scan_range(address_range))
    except KeyboardInterrupt:
        print("\n\nScan interrupted by user")
        return 130

    print("\n" + reporter.render_summary(report))

    show_offline = config.show_offline
    if show_offline is None:
        show_offline = ask_yes_no("\nShow offline hosts?", input_func)
    if show_offline:
        print(reporter.render_offline(report))

    export = config.export
    if export is None:
        export = ask_yes_no("\nExport the results to a file?", input_func)
    if export:
        try:
            path = reporter.export(report, config.export_dir)
        except OSError as e:
            print(f"{colors['red']}Export failed: {e}{colors['reset']}", file=sys.stderr)
            return 1
        print(f"\nResults exported to: {path}")

    return 0


def run():
    """Console script entry point"""
    sys.exit(main())


if __name__ == "__main__":
    run()
