from typing import BinaryIO, Optional

from bitarray import bitarray
from bitarray.util import ba2int


class BitReader:
    """
    A class for reading bits MSB-first from a binary input stream.
    Bytes are fetched one at a time, only when the buffered bits run out,
    so the stream is left positioned right after the last byte touched.
    """

    def __init__(self, in_stream: BinaryIO) -> None:
        """
        Initialize BitReader over an input stream.

        Args:
            in_stream: Binary stream positioned at the first byte to read
        """
        self.in_stream = in_stream
        self.bits = bitarray(endian="big")
        self.pos = 0

    def read_bit(self) -> Optional[int]:
        """
        Read one bit from the stream.

        Returns:
            The bit value (0 or 1), or None when the stream is exhausted
        """
        if self.pos >= len(self.bits):
            byte = self.in_stream.read(1)
            if not byte:
                return None
            self.bits = bitarray(endian="big")
            self.bits.frombytes(byte)
            self.pos = 0
        val = self.bits[self.pos]
        self.pos += 1
        return val

    def read_byte(self) -> Optional[int]:
        """
        Read 8 bits, most significant bit first.

        Returns:
            The byte value, or None if the stream ends before 8 bits are read
        """
        bits = self.read_bits(8)
        if bits is None:
            return None
        return ba2int(bits)

    def read_bits(self, n: int) -> Optional[bitarray]:
        """
        Read n bits as a bit sequence.

        Args:
            n: Number of bits to read

        Returns:
            The bits read, or None if fewer than n bits are available
        """
        res = bitarray(endian="big")
        for _ in range(n):
            bit = self.read_bit()
            if bit is None:
                return None
            res.append(bit)
        return res
