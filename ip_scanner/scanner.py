"""
Asynchronous range scanner
"""

import asyncio
import logging
import time
from typing import Callable, Iterator, Optional, Union

from .config import ScannerConfig
from .ip_parser import AddressRange, enumerate_range, from_int, to_int
from .models import ProbeOutcome, ScanReport
from .prober import PingProber

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 50

OutcomeCallback = Callable[[ProbeOutcome], None]


class AsyncPingScanner:
    """Probes every address of a range with at most ``concurrent_limit`` probes in flight"""

    def __init__(self, config: Optional[ScannerConfig] = None, prober=None,
                 on_outcome: Optional[OutcomeCallback] = None):
        """
        Args:
            config: Scanner configuration, defaults are used when omitted
            prober: Object with ``async probe(ip, timeout_ms) -> ProbeOutcome``
            on_outcome: Called with every outcome as soon as it is recorded
        """
        self.config = config or ScannerConfig()
        self.prober = prober if prober is not None else PingProber(self.config.timeout_ms)
        self.on_outcome = on_outcome
        self.in_flight = 0
        self.peak_in_flight = 0

    async def scan(self, start: Union[str, int], end: Union[str, int]) -> ScanReport:
        """
        Scan an inclusive address range

        Args:
            start: First address (reversed endpoints are swapped)
            end: Last address

        Returns:
            Finalized ScanReport holding exactly one outcome per address

        Raises:
            InvalidAddress: if an endpoint cannot be parsed; nothing is probed then
        """
        address_range = enumerate_range(to_int(start), to_int(end))
        return await self.scan_range(address_range)

    async def scan_range(self, address_range: AddressRange) -> ScanReport:
        """
        Probe every address of a prepared range

        Args:
            address_range: Range to scan

        Returns:
            Finalized ScanReport
        """
        total = len(address_range)
        worker_count = min(self.config.concurrent_limit, total)
        report = ScanReport(start_ip=address_range.first, end_ip=address_range.last)

        logger.info(f"Scanning {address_range.first} - {address_range.last}: "
                    f"{total} addresses, {worker_count} workers, "
                    f"timeout {self.config.timeout_ms} ms")

        self.in_flight = 0
        self.peak_in_flight = 0
        started = time.perf_counter()

        # Workers share one lazy iterator; the event loop runs one worker at a time
        addresses = iter(address_range)
        workers = [
            asyncio.create_task(self._worker(addresses, report))
            for _ in range(worker_count)
        ]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for worker in workers:
                worker.cancel()
            raise

        report.finalize(time.perf_counter() - started)

        logger.info(f"Scan finished in {report.elapsed_seconds:.2f} s: "
                    f"{report.online_count} online, {report.offline_count} offline")
        return report

    async def _worker(self, addresses: Iterator[str], report: ScanReport):
        for ip in addresses:
            outcome = await self._probe_one(ip)
            report.add(outcome)
            self._notify(outcome)

    async def _probe_one(self, ip: str) -> ProbeOutcome:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            outcome = await self.prober.probe(ip, self.config.timeout_ms)
        except Exception as e:
            logger.warning(f"Probe of {ip} raised {e!r}, recording it as failed")
            return ProbeOutcome.failed(ip, e)
        finally:
            self.in_flight -= 1

        if not isinstance(outcome, ProbeOutcome) or outcome.address != ip:
            logger.warning(f"Probe of {ip} returned an unexpected result: {outcome!r}")
            return ProbeOutcome.failed(ip, f"invalid probe result {outcome!r}")
        return outcome

    def _notify(self, outcome: ProbeOutcome):
        if self.on_outcome is None:
            return
        try:
            self.on_outcome(outcome)
        except Exception as e:
            logger.error(f"Progress callback failed for {outcome.address}: {e}")


def scan(start: Union[str, int], end: Union[str, int],
         concurrency_limit: int = DEFAULT_CONCURRENCY,
         timeout_ms: int = 1000,
         prober=None,
         on_outcome: Optional[OutcomeCallback] = None) -> ScanReport:
    """
    Scan an address range and wait for every probe to finish

    Args:
        start: First address of the range
        end: Last address of the range
        concurrency_limit: Maximum number of probes in flight
        timeout_ms: Per-probe reply timeout
        prober: Probe implementation, the system ping by default
        on_outcome: Live progress callback

    Returns:
        ScanReport with one outcome per address

    Raises:
        InvalidAddress: malformed start or end address
        ValueError: non-positive concurrency limit or timeout
    """
    start_ip = from_int(to_int(start))
    end_ip = from_int(to_int(end))

    # ConfigError is a ValueError
    config = ScannerConfig(
        start_ip=start_ip,
        end_ip=end_ip,
        timeout_ms=timeout_ms,
        concurrent_limit=concurrency_limit,
    )
    scanner = AsyncPingScanner(config, prober=prober, on_outcome=on_outcome)
    return asyncio.run(scanner.scan(start_ip, end_ip))
