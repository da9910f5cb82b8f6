"""
Serialization of a Huffman tree's shape and leaf values.

Pre-order: a leaf is bit 0 followed by its byte (8 bits, MSB first),
an internal node is bit 1 followed by its left then right subtree.
Frequencies are not stored.
"""
import io
from typing import BinaryIO

from huffman_archiver.bit_reader import BitReader
from huffman_archiver.bit_writer import BitWriter
from huffman_archiver.errors import FormatError
from huffman_archiver.huffman_coding import HuffmanTree, Leaf


class TreeCodec:
    """Writes and reads trees as byte-aligned bit blocks."""

    # a tree over at most 256 leaves is never deeper than this
    MAX_DEPTH = 255
    # full binary tree over 256 leaves
    MAX_NODES = 2 * 256 - 1

    @staticmethod
    def serialize(tree: HuffmanTree, writer: BitWriter) -> None:
        """
        Write tree to writer. The caller flushes the writer.

        Args:
            tree: Tree with a root
            writer: Destination bit writer

        Raises:
            ValueError: If the tree has no root
        """
        if tree.root is None:
            raise ValueError("Cannot serialize an empty Huffman tree")
        TreeCodec._write_node(tree, tree.root, writer)

    @staticmethod
    def _write_node(tree: HuffmanTree, index: int, writer: BitWriter) -> None:
        node = tree.nodes[index]
        if isinstance(node, Leaf):
            writer.write_bit(0)
            writer.write_byte(node.value)
            return
        writer.write_bit(1)
        TreeCodec._write_node(tree, node.left, writer)
        TreeCodec._write_node(tree, node.right, writer)

    @staticmethod
    def deserialize(reader: BitReader) -> HuffmanTree:
        """
        Rebuild a tree from reader.

        Args:
            reader: Bit reader positioned at the first bit of the tree

        Returns:
            A fresh HuffmanTree with its code table not yet generated

        Raises:
            FormatError: If the bits end early, describe a tree deeper than
                MAX_DEPTH or hold more than MAX_NODES nodes
        """
        tree = HuffmanTree()
        tree.set_root(TreeCodec._read_node(tree, reader, 0))
        return tree

    @staticmethod
    def _read_node(tree: HuffmanTree, reader: BitReader, depth: int) -> int:
        if depth > TreeCodec.MAX_DEPTH:
            raise FormatError(f"Serialized tree deeper than {TreeCodec.MAX_DEPTH} levels")
        if len(tree) >= TreeCodec.MAX_NODES:
            raise FormatError(f"Serialized tree has more than {TreeCodec.MAX_NODES} nodes")
        bit = reader.read_bit()
        if bit is None:
            raise FormatError("Unexpected end of data while reading Huffman tree")
        if bit == 0:
            value = reader.read_byte()
            if value is None:
                raise FormatError("Unexpected end of data while reading a leaf value")
            return tree.add_leaf(value)
        left = TreeCodec._read_node(tree, reader, depth + 1)
        right = TreeCodec._read_node(tree, reader, depth + 1)
        return tree.add_internal(left, right)

    @staticmethod
    def write(tree: HuffmanTree, out_stream: BinaryIO) -> int:
        """
        Serialize tree to a stream, padded to a whole byte.

        Returns:
            Number of bytes written
        """
        data = TreeCodec.to_bytes(tree)
        out_stream.write(data)
        return len(data)

    @staticmethod
    def read(in_stream: BinaryIO) -> HuffmanTree:
        """
        Read a byte-aligned tree from a stream. Padding bits after the
        tree are dropped and the stream is left at the next byte.
        """
        return TreeCodec.deserialize(BitReader(in_stream))

    @staticmethod
    def to_bytes(tree: HuffmanTree) -> bytes:
        buffer = io.BytesIO()
        with BitWriter(buffer) as writer:
            TreeCodec.serialize(tree, writer)
        return buffer.getvalue()
