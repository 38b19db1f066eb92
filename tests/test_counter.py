import pytest

from sentinel.exceptions import CounterRangeError
from sentinel.totp import counter


def test_encode_is_eight_bytes_big_endian() -> None:
    assert counter.encode(0) == b"\x00" * 8
    assert counter.encode(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
    assert counter.encode(0x0102030405060708) == bytes(range(1, 9))
    assert len(counter.encode(54466666)) == counter.COUNTER_BYTES


def test_encode_keeps_bits_above_32() -> None:
    assert counter.encode(2 ** 32) == b"\x00\x00\x00\x01\x00\x00\x00\x00"
    assert counter.encode(2 ** 53 + 1) == b"\x00\x20\x00\x00\x00\x00\x00\x01"
    assert counter.encode(counter.MAX_COUNTER) == b"\xff" * 8


@pytest.mark.parametrize("value", [-1, 2 ** 64, 1.0, "1", True, None])
def test_encode_rejects_out_of_range(value) -> None:
    with pytest.raises(CounterRangeError):
        counter.encode(value)
