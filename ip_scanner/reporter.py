"""
Console summary and text export of scan results
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .models import ProbeOutcome, ScanReport

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "scan_results_"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


class ReportGenerator:
    """Renders a ScanReport for the console and writes it to disk"""

    def __init__(self, colors: Optional[Dict[str, str]] = None):
        self.colors = colors or {}

    def _c(self, name: str) -> str:
        return self.colors.get(name, '')

    @staticmethod
    def format_online(outcome: ProbeOutcome) -> str:
        """Line for an online host: address and latency"""
        return f"{outcome.address:<15} - Latency: {outcome.latency_ms}ms"

    @staticmethod
    def format_offline(outcome: ProbeOutcome) -> str:
        """Line for an offline host: address and status"""
        return f"{outcome.address:<15} - Status: {outcome.status}"

    def format_progress(self, outcome: ProbeOutcome) -> str:
        """Live progress marker: a line for an online host, a dot otherwise"""
        if outcome.reachable:
            return (f"{self._c('green')}✓ {outcome.address} is online "
                    f"(latency: {outcome.latency_ms}ms){self._c('reset')}\n")
        return f"{self._c('red')}.{self._c('reset')}"

    def render_summary(self, report: ScanReport) -> str:
        """
        Summary with counts and the list of online hosts

        Args:
            report: Finished scan

        Returns:
            Text ready for printing
        """
        online = report.online()

        lines = [
            "",
            "========== SUMMARY ==========",
            f"Scan completed in {report.elapsed_seconds:.2f} seconds",
            f"Total addresses scanned: {len(report)}",
            f"Online: {len(online)}",
            f"Offline: {report.offline_count}",
            f"Average latency: {report.average_latency_ms:.2f} ms",
        ]

        if online:
            lines.extend(["", "=== ONLINE HOSTS ===", self._c('green') + "\n".join(
                f"  ✓ {self.format_online(o)}" for o in online
            ) + self._c('reset')])

        return "\n".join(lines)

    def render_offline(self, report: ScanReport) -> str:
        """
        Listing of offline hosts with their status

        Args:
            report: Finished scan

        Returns:
            Text ready for printing
        """
        offline = report.offline()
        if not offline:
            return "\n=== OFFLINE HOSTS ===\n  (none)"
        body = "\n".join(f"  ✗ {self.format_offline(o)}" for o in offline)
        return f"\n=== OFFLINE HOSTS ===\n{self._c('yellow')}{body}{self._c('reset')}"

    @staticmethod
    def build_export_lines(report: ScanReport, generated_at: datetime) -> List[str]:
        """Plain two-section listing, both sections sorted by address"""
        sorted_results = report.sorted()

        lines = [
            f"IP scan performed: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Range: {report.start_ip} - {report.end_ip}",
            "=====================================",
            "",
            "ONLINE HOSTS:",
        ]
        lines.extend(ReportGenerator.format_online(o) for o in sorted_results if o.reachable)
        lines.extend(["", "OFFLINE HOSTS:"])
        lines.extend(ReportGenerator.format_offline(o) for o in sorted_results if not o.reachable)
        return lines

    def export(self, report: ScanReport, directory: str = ".",
               generated_at: Optional[datetime] = None) -> Path:
        """
        Write the report to scan_results_<timestamp>.txt

        Args:
            report: Finished scan
            directory: Target directory, created if missing
            generated_at: Timestamp for the header and file name (now by default)

        Returns:
            Path of the written file

        Raises:
            OSError: if the file cannot be written
        """
        generated_at = generated_at or datetime.now()
        path = Path(directory) / f"{EXPORT_PREFIX}{generated_at.strftime(TIMESTAMP_FORMAT)}.txt"

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write("\n".join(self.build_export_lines(report, generated_at)) + "\n")
        except OSError as e:
            logger.error(f"Failed to export results to {path}: {e}")
            raise

        logger.info(f"Results exported to {path}")
        return path
