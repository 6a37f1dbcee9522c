"""
Single-host reachability probe using the system ping command
"""

import asyncio
import logging
import math
import platform
import re
from typing import List, Optional, Tuple

from .models import PingResult, ProbeOutcome

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 1000

# Extra time granted to the ping process itself before it is killed
PROCESS_GRACE_SECONDS = 1.0

LATENCY_PATTERNS = [
    re.compile(r'time\s*([=<])\s*(\d+(?:[.,]\d+)?)\s*ms', re.IGNORECASE),
    re.compile(r'время\s*([=<])\s*(\d+(?:[.,]\d+)?)\s*мс', re.IGNORECASE),
]

ERROR_MARKERS = [
    "unknown host",
    "name or service not known",
    "could not find host",
    "cannot resolve",
    "temporary failure in name resolution",
    "not permitted",
    "permission denied",
    # iputils "connect: Network is unreachable": no local route, nothing was sent
    "network is unreachable",
    "bad address",
    "usage:",
]

UNREACHABLE_MARKERS = ["unreachable"]
TTL_MARKERS = ["time to live exceeded", "ttl expired", "time-to-live exceeded"]
REPLY_MARKERS = ["ttl="]
TIMEOUT_MARKERS = ["timed out", "100% packet loss", "100.0% packet loss", "0 received", "0 packets received"]


class PingProber:
    """Sends one echo request per call via the platform ping utility"""

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS, system: Optional[str] = None):
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.timeout_ms = timeout_ms
        self.system = (system or platform.system()).lower()

    def build_command(self, ip: str, timeout_ms: int) -> List[str]:
        """Ping command for a single echo request on the current OS"""
        if self.system == 'windows':
            return ['ping', '-n', '1', '-w', str(timeout_ms), ip]
        if self.system == 'darwin' or self.system.endswith('bsd'):
            return ['ping', '-n', '-c', '1', '-W', str(timeout_ms), ip]
        # iputils takes whole seconds
        return ['ping', '-n', '-c', '1', '-W', str(max(1, math.ceil(timeout_ms / 1000))), ip]

    @staticmethod
    def extract_latency(output: str) -> Optional[int]:
        """Round-trip time in whole milliseconds, or None if the output has none"""
        for pattern in LATENCY_PATTERNS:
            matches = pattern.findall(output)
            if matches:
                op, value = matches[-1]
                if op == '<':
                    return 0
                return int(round(float(value.replace(',', '.'))))
        return None

    @staticmethod
    def classify(returncode: int, stdout: str, stderr: str = "") -> Tuple[PingResult, Optional[int], str]:
        """
        Interpret the result of one ping invocation

        Args:
            returncode: Exit status of the ping process
            stdout: Captured standard output
            stderr: Captured standard error

        Returns:
            Tuple (result kind, latency in ms or None, detail text)
        """
        text = f"{stdout}\n{stderr}"
        lowered = text.lower()
        detail = _first_line(stderr) or _first_line(stdout)

        if any(marker in lowered for marker in ERROR_MARKERS):
            for line in text.splitlines():
                if any(marker in line.lower() for marker in ERROR_MARKERS):
                    detail = line.strip()
                    break
            return PingResult.ERROR, None, detail

        if any(marker in lowered for marker in UNREACHABLE_MARKERS):
            return PingResult.UNREACHABLE, None, ""

        if any(marker in lowered for marker in TTL_MARKERS):
            return PingResult.TTL_EXPIRED, None, ""

        if returncode == 0 and any(marker in lowered for marker in REPLY_MARKERS):
            latency = PingProber.extract_latency(text)
            return PingResult.SUCCESS, latency if latency is not None else 0, ""

        if returncode in (0, 1) or any(marker in lowered for marker in TIMEOUT_MARKERS):
            return PingResult.TIMEOUT, None, ""

        return PingResult.ERROR, None, detail or f"ping exited with code {returncode}"

    async def probe(self, ip: str, timeout_ms: Optional[int] = None) -> ProbeOutcome:
        """
        Probe one host

        Never raises: transport problems become an ERROR outcome.

        Args:
            ip: Address to probe
            timeout_ms: Reply timeout, defaults to the prober's own

        Returns:
            ProbeOutcome for the address
        """
        timeout_ms = timeout_ms or self.timeout_ms
        cmd = self.build_command(ip, timeout_ms)
        process = None

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )

            try:
                stdout, stderr = await asyncio.wait_for(
                    process.communicate(),
                    timeout=timeout_ms / 1000 + PROCESS_GRACE_SECONDS
                )
            except asyncio.TimeoutError:
                logger.debug(f"ping {ip}: process did not finish in time, killing it")
                return ProbeOutcome.unreachable(ip, PingResult.TIMEOUT)

            result, latency, detail = self.classify(
                process.returncode,
                stdout.decode('utf-8', errors='ignore'),
                stderr.decode('utf-8', errors='ignore')
            )

        except FileNotFoundError:
            return ProbeOutcome.failed(ip, "ping command not found")
        except Exception as e:
            logger.debug(f"ping {ip} failed: {e!r}")
            return ProbeOutcome.failed(ip, e)
        finally:
            if process is not None and process.returncode is None:
                await _kill(process)

        logger.debug(f"ping {ip}: {result.name} latency={latency} {detail}".rstrip())

        if result is PingResult.SUCCESS:
            # iputils waits whole seconds, so a reply can arrive after timeout_ms
            if latency > timeout_ms:
                logger.debug(f"ping {ip}: reply after {latency} ms exceeds {timeout_ms} ms timeout")
                return ProbeOutcome.unreachable(ip, PingResult.TIMEOUT)
            return ProbeOutcome.online(ip, latency)
        if result is PingResult.ERROR:
            return ProbeOutcome.failed(ip, detail)
        return ProbeOutcome.unreachable(ip, result)


async def _kill(process):
    try:
        process.kill()
    except ProcessLookupError:
        return
    try:
        await process.wait()
    except Exception as e:
        logger.debug(f"Error while reaping ping process: {e}")


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
