"""
Command line front-end:
    huffman-archiver -c <file or folder>
    huffman-archiver -d <archive>.huf
"""
import argparse
import sys
from typing import List, Optional

from huffman_archiver.archiver import HuffmanArchiver
from huffman_archiver.errors import HuffmanArchiveError


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that prints usage and exits with code 1 on bad arguments."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="huffman-archiver",
        description="Huffman coding based compressor for files and folders",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("-c", "--compress", metavar="PATH", help="compress a file or folder into PATH.huf")
    mode.add_argument("-d", "--decompress", metavar="ARCHIVE", help="restore a .huf archive")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("-v", "--verbose", action="store_true", help="print per-file progress")
    output.add_argument("-q", "--quiet", action="store_true", help="print nothing on success")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the archiver with command line arguments.

    :return: int, 0 on success, 1 on any failure
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    archiver = HuffmanArchiver(verbose=args.verbose)
    try:
        if args.compress is not None:
            log = archiver.compress(args.compress)
        else:
            log = archiver.decompress(args.decompress)
    except HuffmanArchiveError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(log)
    return 0
