"""
Binary layouts of .huf archives.

Every archive starts with one tag byte:
    F - single file:   tag, tree, packed content with 4-byte bit count
    G - global tree:   tag, tree, VarInt file count, then per file
                       VarInt path bits, VarInt content bits,
                       packed path and packed content, each with a 4-byte bit count
    S - separate trees: tag, VarInt file count, then per file
                       tree, VarInt path bits, VarInt content bits,
                       packed path, packed content
Trees are padded to a whole byte. Packed bits are MSB first,
the last byte zero-padded.
"""
import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath
from typing import BinaryIO, Iterator, List, Optional, Sequence, Tuple

from bitarray import bitarray

from huffman_archiver.errors import ArchiveIOError, FormatError
from huffman_archiver.huffman_coding import HuffmanTree, byte_frequency
from huffman_archiver.tree_codec import TreeCodec
from huffman_archiver.varint import VarInt

# raw bit count in front of packed data, F and G only
LENGTH_HEADER = struct.Struct("<I")


class ArchiveKind(Enum):
    SINGLE = b"F"
    GLOBAL = b"G"
    SEPARATE = b"S"


@dataclass
class ArchiveMember:
    """One file of a folder: its '/'-separated relative path and its bytes."""

    relative_path: str
    content: bytes


@dataclass
class FileRecord:
    """Encoded form of one folder file. tree is set only in separate-tree archives."""

    path_bits: bitarray
    content_bits: bitarray
    tree: Optional[HuffmanTree] = None


def write_kind(out_stream: BinaryIO, kind: ArchiveKind) -> int:
    out_stream.write(kind.value)
    return 1


def read_kind(in_stream: BinaryIO) -> ArchiveKind:
    """Read the tag byte and map it to an archive kind."""
    tag = in_stream.read(1)
    if not tag:
        raise FormatError("Archive is empty")
    try:
        return ArchiveKind(tag)
    except ValueError:
        raise FormatError(f"Unknown archive format (tag: 0x{tag[0]:02x})") from None


def expect_kind(in_stream: BinaryIO, kind: ArchiveKind) -> None:
    found = read_kind(in_stream)
    if found is not kind:
        raise FormatError(
            f"Expected {kind.name.lower()} archive ({kind.value.decode()}), "
            f"found {found.name.lower()} ({found.value.decode()})"
        )


def write_packed(out_stream: BinaryIO, bits: bitarray, with_header: bool = False) -> int:
    """
    Write bits packed into bytes, optionally preceded by the
    4-byte little-endian bit count.

    :return: int, number of bytes written
    """
    size = 0
    if with_header:
        if len(bits) > 0xFFFFFFFF:
            raise ValueError(f"Bit sequence too long for a 4-byte header: {len(bits)}")
        out_stream.write(LENGTH_HEADER.pack(len(bits)))
        size += LENGTH_HEADER.size
    data = bits.tobytes()
    out_stream.write(data)
    return size + len(data)


def read_packed(in_stream: BinaryIO, bit_count: Optional[int] = None) -> bitarray:
    """
    Read packed bits. When bit_count is None it is taken
    from a 4-byte header in front of the data.

    :return: bitarray, exactly bit_count bits
    :raises FormatError: if the stream holds fewer bytes than needed
    """
    if bit_count is None:
        header = in_stream.read(LENGTH_HEADER.size)
        if len(header) < LENGTH_HEADER.size:
            raise FormatError("Unexpected end of data while reading bit count")
        (bit_count,) = LENGTH_HEADER.unpack(header)

    n_bytes = (bit_count + 7) // 8
    data = in_stream.read(n_bytes)
    if len(data) < n_bytes:
        raise FormatError(
            f"Bit count {bit_count} needs {n_bytes} bytes, only {len(data)} available"
        )
    bits = bitarray(endian="big")
    bits.frombytes(data)
    del bits[bit_count:]
    return bits


def encode_member_path(path: str) -> bytes:
    """
    Path bytes as stored in folder archives: UTF-8, with names the OS
    handed over undecoded (surrogate escapes) written back as raw bytes.
    """
    return path.encode("utf-8", "surrogateescape")


def decode_member_path(raw: bytes) -> str:
    """
    Turn decoded path bytes back into a relative path,
    rejecting paths that would leave the output folder.
    Bytes that are not valid UTF-8 come back as surrogate escapes.
    """
    path = raw.decode("utf-8", "surrogateescape")
    if (
        not path
        or path.startswith("/")
        or "\\" in path
        or PureWindowsPath(path).drive
        or ".." in PurePosixPath(path).parts
    ):
        raise FormatError(f"Unsafe path in archive: {printable_path(path)!r}")
    return path


def printable_path(path: str) -> str:
    """path with undecodable bytes replaced, safe to print."""
    return encode_member_path(path).decode("utf-8", "replace")


class SingleFileArchive:
    """Layout F: one tree, one file."""

    KIND = ArchiveKind.SINGLE

    @staticmethod
    def write(out_stream: BinaryIO, data: bytes) -> Tuple[HuffmanTree, int]:
        """
        Compress data into out_stream.

        :return: tuple, (tree used, number of bytes written)
        :raises ArchiveIOError: if data is empty
        """
        if not data:
            raise ArchiveIOError("Cannot compress an empty file")
        tree = HuffmanTree.from_data(data)

        size = write_kind(out_stream, SingleFileArchive.KIND)
        size += TreeCodec.write(tree, out_stream)
        size += write_packed(out_stream, tree.encode(data), with_header=True)
        return tree, size

    @staticmethod
    def read(in_stream: BinaryIO) -> bytes:
        expect_kind(in_stream, SingleFileArchive.KIND)
        tree = TreeCodec.read(in_stream)
        return tree.decode(read_packed(in_stream))


class GlobalTreeArchive:
    """Layout G: one tree built over every path and every content."""

    KIND = ArchiveKind.GLOBAL

    @staticmethod
    def encode_members(members: Sequence[ArchiveMember]) -> Tuple[HuffmanTree, List[FileRecord]]:
        paths = [encode_member_path(member.relative_path) for member in members]
        tree = HuffmanTree.build_from_freq(
            byte_frequency(*paths, *(member.content for member in members))
        )
        records = [
            FileRecord(tree.encode(path), tree.encode(member.content))
            for path, member in zip(paths, members)
        ]
        return tree, records

    @staticmethod
    def write(out_stream: BinaryIO, members: Sequence[ArchiveMember]) -> int:
        """
        Compress members into out_stream, in the given order.

        :return: int, number of bytes written
        :raises ArchiveIOError: if members is empty
        """
        if not members:
            raise ArchiveIOError("No files to archive")
        tree, records = GlobalTreeArchive.encode_members(members)

        size = write_kind(out_stream, GlobalTreeArchive.KIND)
        size += TreeCodec.write(tree, out_stream)
        size += VarInt.write(out_stream, len(records))
        for record in records:
            size += VarInt.write(out_stream, len(record.path_bits))
            size += VarInt.write(out_stream, len(record.content_bits))
            size += write_packed(out_stream, record.path_bits, with_header=True)
            size += write_packed(out_stream, record.content_bits, with_header=True)
        return size

    @staticmethod
    def iter_members(in_stream: BinaryIO) -> Iterator[ArchiveMember]:
        """Yield the files one at a time, as soon as each is decoded."""
        expect_kind(in_stream, GlobalTreeArchive.KIND)
        tree = TreeCodec.read(in_stream)
        file_count = VarInt.decode(in_stream)
        for _ in range(file_count):
            path_bit_count = VarInt.decode(in_stream)
            content_bit_count = VarInt.decode(in_stream)
            path_bits = read_packed(in_stream)
            content_bits = read_packed(in_stream)
            if len(path_bits) != path_bit_count or len(content_bits) != content_bit_count:
                raise FormatError(
                    "Bit counts disagree: "
                    f"path {path_bit_count} vs {len(path_bits)}, "
                    f"content {content_bit_count} vs {len(content_bits)}"
                )
            yield ArchiveMember(
                decode_member_path(tree.decode(path_bits)), tree.decode(content_bits)
            )


class SeparateTreesArchive:
    """Layout S: every file carries a tree built over its own path and content."""

    KIND = ArchiveKind.SEPARATE

    @staticmethod
    def encode_member(member: ArchiveMember) -> FileRecord:
        path = encode_member_path(member.relative_path)
        tree = HuffmanTree.build_from_freq(byte_frequency(path, member.content))
        return FileRecord(tree.encode(path), tree.encode(member.content), tree)

    @staticmethod
    def write(out_stream: BinaryIO, members: Sequence[ArchiveMember]) -> int:
        """
        Compress members into out_stream, in the given order.

        :return: int, number of bytes written
        :raises ArchiveIOError: if members is empty
        """
        if not members:
            raise ArchiveIOError("No files to archive")

        size = write_kind(out_stream, SeparateTreesArchive.KIND)
        size += VarInt.write(out_stream, len(members))
        for member in members:
            record = SeparateTreesArchive.encode_member(member)
            size += TreeCodec.write(record.tree, out_stream)
            size += VarInt.write(out_stream, len(record.path_bits))
            size += VarInt.write(out_stream, len(record.content_bits))
            size += write_packed(out_stream, record.path_bits)
            size += write_packed(out_stream, record.content_bits)
        return size

    @staticmethod
    def iter_members(in_stream: BinaryIO) -> Iterator[ArchiveMember]:
        """Yield the files one at a time, as soon as each is decoded."""
        expect_kind(in_stream, SeparateTreesArchive.KIND)
        file_count = VarInt.decode(in_stream)
        for _ in range(file_count):
            tree = TreeCodec.read(in_stream)
            path_bit_count = VarInt.decode(in_stream)
            content_bit_count = VarInt.decode(in_stream)
            path_bits = read_packed(in_stream, path_bit_count)
            content_bits = read_packed(in_stream, content_bit_count)
            yield ArchiveMember(
                decode_member_path(tree.decode(path_bits)), tree.decode(content_bits)
            )


def folder_layout(kind: ArchiveKind):
    """Layout class that reads folder archives of the given kind."""
    if kind is ArchiveKind.GLOBAL:
        return GlobalTreeArchive
    if kind is ArchiveKind.SEPARATE:
        return SeparateTreesArchive
    if kind is ArchiveKind.SINGLE:
        raise FormatError("Single-file archive does not hold a folder")
    raise FormatError(f"Unhandled archive kind: {kind}")
