"""
Data models for scan results
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple

from .ip_parser import sort_key


class PingResult(Enum):
    """Outcome kind of a single echo request"""
    SUCCESS = "Online"
    TIMEOUT = "TimedOut"
    UNREACHABLE = "DestinationUnreachable"
    TTL_EXPIRED = "TtlExpired"
    ERROR = "Error"


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of probing one host"""
    address: str
    reachable: bool
    latency_ms: int = 0
    status: str = PingResult.TIMEOUT.value
    result: PingResult = PingResult.TIMEOUT

    def __post_init__(self):
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be non-negative, got {self.latency_ms}")
        if self.reachable != (self.result is PingResult.SUCCESS):
            raise ValueError(f"reachable={self.reachable} contradicts result {self.result.name}")

    @classmethod
    def online(cls, address: str, latency_ms: int) -> "ProbeOutcome":
        """Host replied within the timeout"""
        return cls(address, True, max(0, int(latency_ms)), PingResult.SUCCESS.value, PingResult.SUCCESS)

    @classmethod
    def unreachable(cls, address: str, result: PingResult,
                    detail: Optional[str] = None) -> "ProbeOutcome":
        """Host answered the protocol exchange with a non-success status"""
        status = result.value
        if detail:
            status = f"{status} ({detail})"
        return cls(address, False, 0, status, result)

    @classmethod
    def failed(cls, address: str, error: Any) -> "ProbeOutcome":
        """Probe could not be carried out at all"""
        if isinstance(error, BaseException):
            description = str(error) or type(error).__name__
        else:
            description = str(error) or "unknown error"
        return cls(address, False, 0, f"Error: {description}", PingResult.ERROR)


@dataclass
class ScanReport:
    """All outcomes of one scan run plus its wall-clock duration

    Outcomes are stored in completion order; ``add`` may be called from
    several workers at once.
    """
    start_ip: str = ""
    end_ip: str = ""
    started_at: datetime = field(default_factory=datetime.now)
    elapsed_seconds: float = 0.0
    _outcomes: List[ProbeOutcome] = field(default_factory=list, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)
    _finalized: bool = field(default=False, repr=False)

    def add(self, outcome: ProbeOutcome):
        """
        Record one outcome

        Args:
            outcome: Result of a finished probe

        Raises:
            RuntimeError: if the report is already finalized
        """
        with self._lock:
            if self._finalized:
                raise RuntimeError("ScanReport is finalized, no more outcomes can be added")
            self._outcomes.append(outcome)

    def finalize(self, elapsed_seconds: float):
        """Attach the duration and make the report read-only"""
        with self._lock:
            self.elapsed_seconds = max(0.0, elapsed_seconds)
            self._finalized = True

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def outcomes(self) -> Tuple[ProbeOutcome, ...]:
        """Snapshot of the outcomes recorded so far"""
        with self._lock:
            return tuple(self._outcomes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def __iter__(self):
        return iter(self.outcomes)

    def sorted(self) -> List[ProbeOutcome]:
        """Outcomes ordered by numeric address"""
        return sorted(self.outcomes, key=lambda o: sort_key(o.address))

    def online(self) -> List[ProbeOutcome]:
        """Reachable hosts sorted by address"""
        return [o for o in self.sorted() if o.reachable]

    def offline(self) -> List[ProbeOutcome]:
        """Unreachable or failed hosts sorted by address"""
        return [o for o in self.sorted() if not o.reachable]

    @property
    def online_count(self) -> int:
        return sum(1 for o in self.outcomes if o.reachable)

    @property
    def offline_count(self) -> int:
        return len(self) - self.online_count

    @property
    def average_latency_ms(self) -> float:
        """Mean latency over reachable hosts, 0 when none responded"""
        latencies = [o.latency_ms for o in self.outcomes if o.reachable]
        if not latencies:
            return 0.0
        return sum(latencies) / len(latencies)
