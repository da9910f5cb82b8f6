"""
Main class for compressing files and folders into .huf archives
and restoring them.
"""
import io
import os
from typing import List, Optional

from huffman_archiver.archive_format import (
    ArchiveKind,
    ArchiveMember,
    encode_member_path,
    folder_layout,
    printable_path,
    read_kind,
)
from huffman_archiver.errors import ArchiveIOError
from huffman_archiver.file_system import FileSystem, LocalFileSystem
from huffman_archiver.huffman_compressor import HuffmanCompressor, size_report
from huffman_archiver.strategy import StrategySelector


class HuffmanArchiver:
    """
    Compress and decompress entry points.

    Compressing X writes X.huf. A file becomes a single-file archive;
    a folder is built both as a global-tree and a separate-trees archive
    and the smaller one is kept. Decompressing X.huf restores X, choosing
    the layout from the archive's first byte.
    """

    ARCHIVE_SUFFIX = ".huf"

    def __init__(self, file_system: Optional[FileSystem] = None, verbose: bool = False):
        self.fs = file_system or LocalFileSystem()
        self.verbose = verbose
        self.selector = StrategySelector()

    def _progress(self, message: str) -> None:
        if self.verbose:
            print(message)

    @classmethod
    def archive_path_for(cls, path: str) -> str:
        """Archive name for a file or folder; trailing separators are dropped."""
        return (path.rstrip("/\\") or path) + cls.ARCHIVE_SUFFIX

    @classmethod
    def output_path_for(cls, archive_path: str) -> str:
        """Path restored from an archive: its name without the .huf suffix."""
        if not archive_path.endswith(cls.ARCHIVE_SUFFIX) or archive_path == cls.ARCHIVE_SUFFIX:
            raise ArchiveIOError(f"Not a {cls.ARCHIVE_SUFFIX} archive: {archive_path}")
        return archive_path[: -len(cls.ARCHIVE_SUFFIX)]

    def compress(self, path: str) -> str:
        """
        Compress a file or a folder.

        :return: str, log information
        :raises ArchiveIOError: if path is missing, or is an empty file or folder
        """
        source = path.rstrip("/\\") or path
        if self.fs.is_dir(source):
            return self.compress_folder(source)
        if self.fs.is_file(source):
            return self.compress_file(source)
        raise ArchiveIOError(f"{path} is not a valid file or folder")

    def compress_file(self, path: str) -> str:
        output_path = self.archive_path_for(path)
        self._progress(f"Compressing {path} -> {output_path}")

        data = self.fs.read_all(path)
        if not data:
            raise ArchiveIOError(f"File is empty: {path}")
        payload, info = HuffmanCompressor.compress_bytes(data)
        self.fs.write_all(output_path, payload)
        return "\n".join([f"Compressed {path} -> {output_path}", info])

    def compress_folder(self, folder: str) -> str:
        output_path = self.archive_path_for(folder)
        self._progress(f"Compressing folder {folder} -> {output_path}")

        entries = self.fs.list_files(folder)
        if not entries:
            raise ArchiveIOError(f"Folder is empty: {folder}")

        members: List[ArchiveMember] = []
        for entry in entries:
            name = printable_path(entry.relative_path)
            self._progress(f"  Compressing {name} ({entry.size} bytes)")
            members.append(
                ArchiveMember(entry.relative_path, self.fs.read_all(entry.absolute_path))
            )

        result = self.selector.select(members)
        self.fs.write_all(output_path, result.payload)

        log = [
            f"Compressed folder {folder} -> {output_path}",
            f"Found {len(members)} files",
            f"Global tree archive: {result.global_size} bytes",
            f"Separate trees archive: {result.separate_size} bytes",
        ]
        if result.kind is ArchiveKind.GLOBAL:
            log.append(
                f"Global tree is smaller ({result.global_size} B vs {result.separate_size} B)"
            )
        else:
            log.append(
                f"Separate trees are smaller ({result.separate_size} B vs {result.global_size} B)"
            )
        original_size = sum(
            len(encode_member_path(member.relative_path)) + len(member.content)
            for member in members
        )
        log.extend(size_report(original_size, result.size))
        return "\n".join(log)

    def decompress(self, archive_path: str) -> str:
        """
        Restore the file or folder stored in archive_path.

        :return: str, log information
        :raises ArchiveIOError: if the archive cannot be read or has no .huf suffix
        :raises FormatError: if the archive is malformed
        """
        output_path = self.output_path_for(archive_path)
        archive = self.fs.read_all(archive_path)
        kind = read_kind(io.BytesIO(archive))

        if kind is ArchiveKind.SINGLE:
            return self.decompress_file(archive, output_path)
        if kind is ArchiveKind.GLOBAL or kind is ArchiveKind.SEPARATE:
            return self.decompress_folder(archive, output_path)
        raise ArchiveIOError(f"Unhandled archive kind: {kind}")

    def decompress_file(self, archive: bytes, output_path: str) -> str:
        data, info = HuffmanCompressor.decompress_bytes(archive)
        self.fs.write_all(output_path, data)
        return "\n".join([info, f"Output file: {output_path}"])

    def decompress_folder(self, archive: bytes, output_folder: str) -> str:
        """
        Files are written one by one as they are decoded; if the archive
        turns out to be malformed, files already written stay on disk.
        """
        in_stream = io.BytesIO(archive)
        layout = folder_layout(read_kind(in_stream))
        in_stream.seek(0)

        self.fs.ensure_dir(output_folder)
        restored = 0
        for member in layout.iter_members(in_stream):
            target = os.path.join(output_folder, *member.relative_path.split("/"))
            self.fs.ensure_dir(os.path.dirname(target))
            self.fs.write_all(target, member.content)
            restored += 1
            name = printable_path(member.relative_path)
            self._progress(f"  Extracting {name} ({len(member.content)} bytes)")

        return "\n".join(
            [
                f"Layout: {layout.KIND.name.lower()} ({layout.KIND.value.decode()})",
                f"Extracted {restored} files",
                f"Output folder: {output_folder}",
            ]
        )
