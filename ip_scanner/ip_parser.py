"""
IPv4 address parsing, conversion and range enumeration
"""

import ipaddress
import logging
from typing import Iterator, Tuple, Union

logger = logging.getLogger(__name__)

MAX_ADDRESS = 2 ** 32 - 1

AddressLike = Union[str, int]


class InvalidAddress(ValueError):
    """Address text is not a dotted-decimal IPv4 literal"""

    def __init__(self, value, reason: str = ""):
        self.value = value
        message = f"Invalid IPv4 address: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


def parse(text: str) -> int:
    """
    Parse a dotted-decimal IPv4 literal

    Args:
        text: Address such as "192.168.1.1"

    Returns:
        Address as an unsigned 32-bit integer

    Raises:
        InvalidAddress: if the text is not exactly four decimal octets in 0-255
    """
    if not isinstance(text, str):
        raise InvalidAddress(text, "expected text")

    candidate = text.strip()
    if not candidate:
        raise InvalidAddress(text, "empty")

    try:
        return int(ipaddress.IPv4Address(candidate))
    except ipaddress.AddressValueError as e:
        raise InvalidAddress(text, str(e)) from None


def to_int(address: Union[str, bytes, int]) -> int:
    """Convert dotted text, 4 network-order bytes or an int to an integer address"""
    if isinstance(address, bool):
        raise InvalidAddress(address, "expected address")
    if isinstance(address, int):
        from_int(address)
        return address
    if isinstance(address, (bytes, bytearray)):
        return from_bytes(address)
    return parse(address)


def from_int(value: int) -> str:
    """Convert an integer address to dotted text"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAddress(value, "expected integer")
    if not 0 <= value <= MAX_ADDRESS:
        raise InvalidAddress(value, "outside 0..2**32-1")
    return str(ipaddress.IPv4Address(value))


def to_bytes(value: int) -> bytes:
    """Big-endian (network order) representation of an integer address"""
    from_int(value)
    return value.to_bytes(4, "big")


def from_bytes(data: bytes) -> int:
    """Integer address from its 4-byte network-order representation"""
    if len(data) != 4:
        raise InvalidAddress(bytes(data), "expected 4 bytes")
    return int.from_bytes(data, "big")


def sort_key(ip_str: str) -> Tuple[int, int, str]:
    """
    Numeric sort key for address text

    Invalid addresses sort after all valid ones.
    """
    try:
        return (0, parse(ip_str), "")
    except InvalidAddress:
        return (1, 0, str(ip_str))


class AddressRange:
    """Inclusive, ascending range of IPv4 addresses produced lazily"""

    __slots__ = ("low", "high")

    def __init__(self, low: AddressLike, high: AddressLike):
        low = to_int(low)
        high = to_int(high)

        if high < low:
            logger.debug(f"Range endpoints reversed, swapping {from_int(low)} and {from_int(high)}")
            low, high = high, low

        self.low = low
        self.high = high

    @classmethod
    def from_text(cls, start: str, end: str) -> "AddressRange":
        """Build a range from two dotted-decimal endpoints"""
        return cls(parse(start), parse(end))

    def __len__(self) -> int:
        return self.high - self.low + 1

    def __iter__(self) -> Iterator[str]:
        for value in range(self.low, self.high + 1):
            yield from_int(value)

    def __contains__(self, address) -> bool:
        try:
            value = to_int(address)
        except InvalidAddress:
            return False
        return self.low <= value <= self.high

    def __eq__(self, other) -> bool:
        if not isinstance(other, AddressRange):
            return NotImplemented
        return (self.low, self.high) == (other.low, other.high)

    def __hash__(self) -> int:
        return hash((self.low, self.high))

    def __repr__(self) -> str:
        return f"AddressRange({from_int(self.low)!r}, {from_int(self.high)!r})"

    @property
    def first(self) -> str:
        """Lowest address as text"""
        return from_int(self.low)

    @property
    def last(self) -> str:
        """Highest address as text"""
        return from_int(self.high)


def enumerate_range(low: AddressLike, high: AddressLike) -> AddressRange:
    """
    Inclusive ascending sequence of addresses between two endpoints

    Reversed endpoints are swapped. The result is a restartable lazy
    iterable, so even a /8 never materializes in memory.

    Args:
        low: First address (text or integer)
        high: Last address (text or integer)

    Returns:
        AddressRange over low..high
    """
    return AddressRange(low, high)
