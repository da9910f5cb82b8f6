"""
VarInt -
unsigned 32-bit integers stored as 7 data bits per byte,
with the high bit set on every byte except the last
"""
from typing import BinaryIO

from huffman_archiver.errors import VarIntOverrun


class VarInt:
    """Base-128 encoding used for file counts and bit lengths."""

    MAX_VALUE = 0xFFFFFFFF
    # 5 * 7 = 35 bits covers every 32-bit value
    MAX_BYTES = 5

    @staticmethod
    def _check_range(value: int) -> None:
        if not 0 <= value <= VarInt.MAX_VALUE:
            raise ValueError(f"VarInt value out of 32-bit unsigned range: {value}")

    @staticmethod
    def encode(value: int) -> bytes:
        """
        Encode value as a byte sequence, low 7-bit group first.

        :param value: int, 0 <= value < 2**32
        :return: bytes, 1 to 5 bytes
        """
        VarInt._check_range(value)
        out = bytearray()
        while value >= 0x80:
            out.append((value & 0x7F) | 0x80)
            value >>= 7
        out.append(value)
        return bytes(out)

    @staticmethod
    def write(out_stream: BinaryIO, value: int) -> int:
        """
        Write the encoding of value to a stream.

        :return: int, number of bytes written
        """
        encoded = VarInt.encode(value)
        out_stream.write(encoded)
        return len(encoded)

    @staticmethod
    def decode(in_stream: BinaryIO) -> int:
        """
        Read one VarInt from a stream.

        :param in_stream: binary stream positioned at the first VarInt byte
        :return: int, the decoded value
        :raises VarIntOverrun: if the stream ends inside the VarInt, the
            continuation chain is longer than MAX_BYTES, or the value does
            not fit in 32 bits
        """
        result = 0
        shift = 0
        for _ in range(VarInt.MAX_BYTES):
            raw = in_stream.read(1)
            if not raw:
                raise VarIntOverrun("Unexpected end of data inside VarInt")
            byte = raw[0]
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                if result > VarInt.MAX_VALUE:
                    raise VarIntOverrun(f"VarInt value exceeds 32 bits: {result}")
                return result
            shift += 7
        raise VarIntOverrun(f"VarInt longer than {VarInt.MAX_BYTES} bytes")

    @staticmethod
    def encoded_size(value: int) -> int:
        """Number of bytes encode(value) produces, computed without encoding."""
        VarInt._check_range(value)
        size = 1
        while value >= 0x80:
            size += 1
            value >>= 7
        return size
