import pytest

from ip_scanner.ip_parser import (
    AddressRange,
    InvalidAddress,
    enumerate_range,
    from_bytes,
    from_int,
    parse,
    sort_key,
    to_bytes,
    to_int,
)


@pytest.mark.parametrize("text", [
    "0.0.0.0",
    "10.0.0.1",
    "127.0.0.1",
    "192.168.1.254",
    "255.255.255.255",
])
def test_round_trip_identity(text):
    value = parse(text)
    assert from_int(value) == text
    assert parse(from_int(value)) == value


def test_parse_known_values():
    assert parse("0.0.0.1") == 1
    assert parse("1.0.0.0") == 1 << 24
    assert parse("192.168.1.1") == 0xC0A80101
    assert parse("  10.0.0.1\n") == parse("10.0.0.1")


@pytest.mark.parametrize("text", [
    "192.168.1.256",
    "not.an.ip",
    "",
    "   ",
    "1.2.3",
    "1.2.3.4.5",
    "1.2.3.-4",
    "1.2.3.+4",
    "01.2.3.4",
    "1..2.3",
    "::1",
    "example.com",
    "1.2.3.4/24",
])
def test_parse_rejects_malformed(text):
    with pytest.raises(InvalidAddress):
        parse(text)


def test_parse_rejects_non_text():
    with pytest.raises(InvalidAddress):
        parse(3232235777)


def test_invalid_address_is_value_error():
    with pytest.raises(ValueError) as exc:
        parse("192.168.1.256")
    assert exc.value.value == "192.168.1.256"
    assert "192.168.1.256" in str(exc.value)


def test_from_int_bounds():
    assert from_int(0) == "0.0.0.0"
    assert from_int(2 ** 32 - 1) == "255.255.255.255"
    with pytest.raises(InvalidAddress):
        from_int(2 ** 32)
    with pytest.raises(InvalidAddress):
        from_int(-1)
    with pytest.raises(InvalidAddress):
        from_int(True)


def test_bytes_are_network_order():
    value = parse("192.168.1.2")
    assert to_bytes(value) == bytes([192, 168, 1, 2])
    assert from_bytes(b"\xc0\xa8\x01\x02") == value
    assert to_int(b"\x0a\x00\x00\x01") == parse("10.0.0.1")
    with pytest.raises(InvalidAddress):
        from_bytes(b"\x01\x02\x03")


def test_enumerate_inclusive_ascending():
    rng = enumerate_range(parse("10.0.0.1"), parse("10.0.0.5"))
    addresses = list(rng)
    assert addresses == ["10.0.0.1", "10.0.0.2", "10.0.0.3", "10.0.0.4", "10.0.0.5"]
    assert len(rng) == 5


def test_enumerate_crosses_octet_boundary():
    addresses = list(enumerate_range("10.0.0.254", "10.0.1.1"))
    assert addresses == ["10.0.0.254", "10.0.0.255", "10.0.1.0", "10.0.1.1"]


@pytest.mark.parametrize("low,high", [
    ("192.168.1.1", "192.168.1.1"),
    ("10.0.0.0", "10.0.3.255"),
    ("0.0.0.0", "0.0.0.9"),
    ("255.255.255.250", "255.255.255.255"),
])
def test_enumerate_length_and_distinct(low, high):
    rng = enumerate_range(low, high)
    values = [parse(a) for a in rng]
    assert len(values) == parse(high) - parse(low) + 1 == len(rng)
    assert values[0] == parse(low)
    assert values[-1] == parse(high)
    assert all(b > a for a, b in zip(values, values[1:]))


def test_reversed_endpoints_are_normalized():
    assert list(enumerate_range("10.0.0.5", "10.0.0.1")) == list(enumerate_range("10.0.0.1", "10.0.0.5"))
    assert enumerate_range("10.0.0.5", "10.0.0.1") == AddressRange("10.0.0.1", "10.0.0.5")


def test_range_is_lazy_and_restartable():
    rng = enumerate_range("10.0.0.0", "10.255.255.255")
    assert len(rng) == 2 ** 24
    assert "10.128.0.1" in rng
    assert "11.0.0.0" not in rng
    assert "garbage" not in rng

    first = iter(rng)
    assert next(first) == "10.0.0.0"
    assert next(first) == "10.0.0.1"
    # A fresh iterator starts over
    assert next(iter(rng)) == "10.0.0.0"


def test_from_text_rejects_bad_endpoint():
    with pytest.raises(InvalidAddress):
        AddressRange.from_text("10.0.0.1", "10.0.0.300")


def test_sort_key_is_numeric():
    addresses = ["10.0.0.10", "bogus", "10.0.0.9", "9.255.255.255"]
    assert sorted(addresses, key=sort_key) == ["9.255.255.255", "10.0.0.9", "10.0.0.10", "bogus"]
