"""
Choice between the global-tree and separate-trees layouts for a folder.
"""
import io
from dataclasses import dataclass
from typing import Sequence

from huffman_archiver.archive_format import (
    ArchiveKind,
    ArchiveMember,
    GlobalTreeArchive,
    SeparateTreesArchive,
)


@dataclass
class SelectionResult:
    """Chosen archive bytes plus the sizes both layouts reached."""

    kind: ArchiveKind
    payload: bytes
    global_size: int
    separate_size: int

    @property
    def size(self) -> int:
        return len(self.payload)


class StrategySelector:
    """
    Builds both folder layouts from the same in-memory file contents
    and keeps the smaller one. Equal sizes go to the global layout.
    """

    def select(self, members: Sequence[ArchiveMember]) -> SelectionResult:
        """
        Args:
            members: Folder files in the order they are stored

        Returns:
            The smaller archive and both sizes
        """
        global_buffer = io.BytesIO()
        GlobalTreeArchive.write(global_buffer, members)
        separate_buffer = io.BytesIO()
        SeparateTreesArchive.write(separate_buffer, members)

        global_bytes = global_buffer.getvalue()
        separate_bytes = separate_buffer.getvalue()
        if len(global_bytes) <= len(separate_bytes):
            kind, payload = ArchiveKind.GLOBAL, global_bytes
        else:
            kind, payload = ArchiveKind.SEPARATE, separate_bytes
        return SelectionResult(kind, payload, len(global_bytes), len(separate_bytes))
