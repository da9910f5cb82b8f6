"""
Huffman archiver -
lossless compression of single files and whole folders
"""
from huffman_archiver.archiver import HuffmanArchiver
from huffman_archiver.errors import (
    ArchiveIOError,
    EncodingGapError,
    FormatError,
    HuffmanArchiveError,
    VarIntOverrun,
)

__all__ = [
    "HuffmanArchiver",
    "HuffmanArchiveError",
    "ArchiveIOError",
    "FormatError",
    "EncodingGapError",
    "VarIntOverrun",
]
