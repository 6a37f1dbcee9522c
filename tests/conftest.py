import asyncio

import pytest

from ip_scanner.models import PingResult, ProbeOutcome


class FakeProber:
    """Instrumented prober that never touches the network"""

    def __init__(self, online=None, failing=(), raising=(), latency=5, delay=0.0):
        self.online = set(online) if online is not None else None
        self.failing = set(failing)
        self.raising = set(raising)
        self.latency = latency
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def probe(self, ip, timeout_ms=None):
        self.calls.append(ip)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if ip in self.raising:
                raise OSError(f"socket error for {ip}")
            if ip in self.failing:
                return ProbeOutcome.failed(ip, "simulated transport failure")
            if self.online is None or ip in self.online:
                return ProbeOutcome.online(ip, self.latency)
            return ProbeOutcome.unreachable(ip, PingResult.TIMEOUT)
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_prober():
    return FakeProber()
