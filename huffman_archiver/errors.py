"""Exceptions raised by the archiver."""


class HuffmanArchiveError(Exception):
    """Base class for every failure reported by the archiver."""


class ArchiveIOError(HuffmanArchiveError, OSError):
    """A file or folder cannot be read, written or is unusable as input."""


class FormatError(HuffmanArchiveError, ValueError):
    """The archive bytes do not follow the expected layout."""


class VarIntOverrun(FormatError):
    """A variable-length integer is longer than 5 bytes, too large, or cut off."""


class EncodingGapError(HuffmanArchiveError, KeyError):
    """
    A byte to encode has no entry in the code table.
    The offending value is kept in byte_value.
    """

    def __init__(self, byte_value: int):
        super().__init__(byte_value)
        self.byte_value = byte_value

    def __str__(self):
        return f"byte 0x{self.byte_value:02X} has no Huffman code"
