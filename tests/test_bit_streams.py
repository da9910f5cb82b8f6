import io

import pytest
from bitarray import bitarray

from huffman_archiver.bit_reader import BitReader
from huffman_archiver.bit_writer import BitWriter


def test_write_bits_msb_first():
    out = io.BytesIO()
    writer = BitWriter(out)
    for bit in (1, 0, 1, 0, 0, 0, 0, 1):
        writer.write_bit(bit)
    assert out.getvalue() == b"\xa1"
    assert writer.count == 1


def test_flush_pads_low_bits_with_zeros():
    out = io.BytesIO()
    with BitWriter(out) as writer:
        writer.write_bit(1)
        writer.write_bit(1)
        writer.write_bit(0)
    assert out.getvalue() == b"\xc0"
    assert writer.count == 1


def test_flush_when_aligned_writes_nothing():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_byte(0x7F)
    writer.flush()
    writer.flush()
    assert out.getvalue() == b"\x7f"


def test_write_byte_across_byte_boundary():
    out = io.BytesIO()
    with BitWriter(out) as writer:
        writer.write_bit(1)
        writer.write_byte(0xFF)
    assert out.getvalue() == b"\xff\x80"


def test_write_bits_sequence():
    out = io.BytesIO()
    with BitWriter(out) as writer:
        writer.write_bits(bitarray("1111000011", endian="big"))
    assert out.getvalue() == b"\xf0\xc0"


@pytest.mark.parametrize("bit", [2, -1])
def test_write_bit_rejects_non_binary(bit):
    with pytest.raises(ValueError):
        BitWriter(io.BytesIO()).write_bit(bit)


@pytest.mark.parametrize("value", [256, -1])
def test_write_byte_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        BitWriter(io.BytesIO()).write_byte(value)


def test_read_bits_msb_first():
    reader = BitReader(io.BytesIO(b"\xa1"))
    bits = [reader.read_bit() for _ in range(8)]
    assert bits == [1, 0, 1, 0, 0, 0, 0, 1]
    assert reader.read_bit() is None


def test_read_byte_unaligned():
    reader = BitReader(io.BytesIO(b"\xff\x80"))
    assert reader.read_bit() == 1
    assert reader.read_byte() == 0xFF


def test_read_byte_fails_mid_byte():
    reader = BitReader(io.BytesIO(b"\xff"))
    reader.read_bit()
    assert reader.read_byte() is None


def test_read_bits_returns_none_when_short():
    reader = BitReader(io.BytesIO(b"\x0f"))
    assert reader.read_bits(4) == bitarray("0000")
    assert reader.read_bits(5) is None


def test_reader_consumes_only_bytes_it_needs():
    stream = io.BytesIO(b"\x80\x42")
    reader = BitReader(stream)
    assert reader.read_bit() == 1
    assert stream.read() == b"\x42"
