"""
Single-file Huffman compressor: stream in, F archive out, and back.
"""
from typing import BinaryIO

from huffman_archiver.archive_format import SingleFileArchive
from huffman_archiver.compressor_ABC import Compressor


def size_report(original_size: int, compressed_size: int) -> list:
    """Lines with sizes and the space saving, as shown after compression."""
    log = [
        f"Original size: {original_size} bytes",
        f"Compressed size: {compressed_size} bytes",
    ]
    if original_size:
        ratio = (1 - compressed_size / original_size) * 100
        log.append(f"Compression ratio: {ratio:.1f}%")
    return log


class HuffmanCompressor(Compressor):
    """Compresses one byte stream into the single-file archive layout."""

    def compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        data = input_stream.read()
        tree, compressed_size = SingleFileArchive.write(output_stream, data)
        log = [f"Found {len(tree.codes)} distinct bytes"]
        log.extend(size_report(len(data), compressed_size))
        return "\n".join(log)

    def decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        data = SingleFileArchive.read(input_stream)
        output_stream.write(data)
        return f"Restored {len(data)} bytes"
