"""
Huffman coding algorithm -
frequency analysis, prefix tree construction,
code table generation, encoding and decoding of byte data
"""
import heapq
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Union

from bitarray import bitarray

from huffman_archiver.errors import EncodingGapError, FormatError


@dataclass(frozen=True)
class Leaf:
    """Tree leaf holding one byte value."""

    value: int


@dataclass(frozen=True)
class Internal:
    """Tree node with two children, given as indexes into the tree's node list."""

    left: int
    right: int


Node = Union[Leaf, Internal]


def byte_frequency(*chunks: Iterable[int]) -> Counter:
    """
    Function builds dictionary with frequency
    of each byte value over all given chunks.

    :param chunks: byte sequences counted together as one unit
    :return: Counter, {byte value: count}, only bytes that occur
    """
    freq = Counter()
    for chunk in chunks:
        freq.update(chunk)
    return freq


class HuffmanTree:
    """
    Class object for Huffman Tree. Nodes live in a list owned
    by the tree and reference their children by index.

    Equal counts are broken deterministically: leaves enter the queue
    in ascending (count, byte value) order, and each queue entry is
    ordered by (count, sequence number), where new internal nodes take
    the next sequence number. The first node popped becomes the left
    child, so the same frequency table always yields the same tree.
    """

    def __init__(self):
        """
        Function initializes an empty tree.
        """
        self.nodes: list = []
        self.root: Optional[int] = None
        self.res_codes: Dict[int, bitarray] = {}

    def add_leaf(self, value: int) -> int:
        """Append a leaf and return its index."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Leaf value must be a byte, got {value}")
        self.nodes.append(Leaf(value))
        self.res_codes = {}
        return len(self.nodes) - 1

    def add_internal(self, left: int, right: int) -> int:
        """Append an internal node over two existing nodes and return its index."""
        self.nodes.append(Internal(left, right))
        self.res_codes = {}
        return len(self.nodes) - 1

    def set_root(self, index: int) -> None:
        self.root = index
        self.res_codes = {}

    @classmethod
    def build_from_freq(cls, freq_dict: Dict[int, int]) -> "HuffmanTree":
        """
        Builds Huffman tree from a frequency table
        and generates prefix codes.

        :param freq_dict: dict, {byte value: frequency}
        :return: HuffmanTree with res_codes filled
        :raises ValueError: if no byte has a positive count
        """
        leaves = sorted(
            (count, value) for value, count in freq_dict.items() if count > 0
        )
        if not leaves:
            raise ValueError("Cannot build a Huffman tree from an empty frequency table")

        tree = cls()
        heap = []
        for seq, (count, value) in enumerate(leaves):
            heap.append((count, seq, tree.add_leaf(value)))
        heapq.heapify(heap)

        seq = len(heap)
        while len(heap) > 1:
            # left smallest node
            l_count, _, l_index = heapq.heappop(heap)
            # right smallest node
            r_count, _, r_index = heapq.heappop(heap)
            merged = tree.add_internal(l_index, r_index)
            heapq.heappush(heap, (l_count + r_count, seq, merged))
            seq += 1

        tree.set_root(heap[0][2])
        tree.codes_generation()
        return tree

    @classmethod
    def from_data(cls, data: bytes) -> "HuffmanTree":
        """Builds the tree for data from its own byte frequencies."""
        return cls.build_from_freq(byte_frequency(data))

    def codes_generation(self, node: Optional[int] = None, curr_code: Optional[bitarray] = None):
        """
        Recursive function that generates
        code for each byte, preorder traversal of Huffman's tree.
        Left edges append 0, right edges append 1.

        :param node: index of node to start traversal from
        :param curr_code: bitarray, current code of a byte
        """
        # if node is not passed, we start traversal from the root
        if node is None:
            if self.root is None:
                raise ValueError("Huffman tree has no root")
            self.res_codes = {}
            node = self.root
            curr_code = bitarray(endian="big")

        current = self.nodes[node]
        # if our node is a leaf than we write the code for it
        if isinstance(current, Leaf):
            # a single-leaf tree has an empty path; its code is "0"
            self.res_codes[current.value] = (
                curr_code if curr_code else bitarray("0", endian="big")
            )
            return

        self.codes_generation(current.left, curr_code + bitarray("0", endian="big"))
        self.codes_generation(current.right, curr_code + bitarray("1", endian="big"))

    @property
    def codes(self) -> Dict[int, bitarray]:
        """Code table for the current tree, regenerated after any change."""
        if not self.res_codes:
            self.codes_generation()
        return self.res_codes

    def encode(self, data: bytes) -> bitarray:
        """
        Encodes data with the code table.

        :param data: bytes to encode
        :return: bitarray, concatenated codes; its length is the exact bit count
        :raises EncodingGapError: if data holds a byte without a code
        """
        codes = self.codes
        missing = set(data).difference(codes)
        if missing:
            raise EncodingGapError(min(missing))
        res = bitarray(endian="big")
        res.encode(codes, data)
        return res

    def decode(self, bits: bitarray) -> bytes:
        """
        Decodes bits by walking the tree: 0 goes left, 1 goes right,
        a leaf emits its byte and restarts from the root.

        :param bits: bitarray holding exactly the encoded bits
        :return: bytes, decoded data
        :raises FormatError: if the bits do not end on a code boundary
        """
        if self.root is None:
            raise FormatError("Cannot decode with an empty Huffman tree")

        nodes = self.nodes
        root = nodes[self.root]
        if isinstance(root, Leaf):
            if bits.any():
                raise FormatError("Invalid bit 1 for a single-symbol tree")
            return bytes([root.value]) * len(bits)

        decoded = bytearray()
        current = root
        for bit in bits:
            child = nodes[current.right if bit else current.left]
            if isinstance(child, Leaf):
                decoded.append(child.value)
                current = root
            else:
                current = child

        if current is not root:
            raise FormatError("Encoded bit sequence ends in the middle of a code")
        return bytes(decoded)

    def structure(self, node: Optional[int] = None):
        """
        Nested view of the tree shape: a leaf is its byte value,
        an internal node is a (left, right) tuple.
        """
        if node is None:
            node = self.root
        current = self.nodes[node]
        if isinstance(current, Leaf):
            return current.value
        return (self.structure(current.left), self.structure(current.right))

    def __len__(self) -> int:
        return len(self.nodes)
