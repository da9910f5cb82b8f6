from typing import BinaryIO

from bitarray import bitarray
from bitarray.util import int2ba


class BitWriter:
    """
    A class for writing bits MSB-first to a binary output stream.
    Complete bytes are written as soon as 8 bits are collected.
    """

    def __init__(self, out_stream: BinaryIO) -> None:
        """
        Initialize a new BitWriter over an output stream.

        Args:
            out_stream: Binary stream that receives the packed bytes
        """
        self.out_stream = out_stream
        self.bits = bitarray(endian="big")
        self.count = 0

    def write_bit(self, bit: int) -> None:
        """
        Append one bit to the pending byte.

        Args:
            bit: 0 or 1

        Raises:
            ValueError: If bit is not 0 or 1
        """
        if bit not in (0, 1):
            raise ValueError(f"Bit must be 0 or 1, got {bit!r}")
        self.bits.append(bit)
        if len(self.bits) == 8:
            self._write_complete_bytes()

    def write_byte(self, value: int) -> None:
        """
        Write 8 bits of value, most significant bit first.

        Args:
            value: Integer in range 0-255

        Raises:
            ValueError: If value does not fit in one byte
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        self.write_bits(int2ba(value, length=8, endian="big"))

    def write_bits(self, bits: bitarray) -> None:
        """
        Write a whole bit sequence.

        Args:
            bits: Bits to append, in order
        """
        self.bits.extend(bits)
        self._write_complete_bytes()

    def flush(self) -> None:
        """
        Write the pending partial byte, zero-padding its low bits.
        Does nothing when the writer is byte aligned.
        """
        if self.bits:
            self.bits.fill()
            self._write_complete_bytes()

    def _write_complete_bytes(self) -> None:
        n_bytes = len(self.bits) // 8
        if n_bytes == 0:
            return
        self.out_stream.write(self.bits[: n_bytes * 8].tobytes())
        del self.bits[: n_bytes * 8]
        self.count += n_bytes

    def __enter__(self) -> "BitWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.flush()
