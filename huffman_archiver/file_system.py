import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from huffman_archiver.errors import ArchiveIOError


@dataclass
class FileEntry:
    """A regular file found under a folder."""

    relative_path: str
    absolute_path: str
    size: int


class FileSystem(ABC):
    """
    Інтерфейс доступу до файлів, яким користується архіватор:
    перелік файлів теки, читання, запис і створення тек.
    """

    @abstractmethod
    def list_files(self, root: str) -> List[FileEntry]:
        """
        Перелік усіх звичайних файлів під root, рекурсивно.

        Args:
            root: Шлях до теки

        Returns:
            Записи з відносними шляхами через '/', у стабільному порядку
        """

    @abstractmethod
    def read_all(self, path: str) -> bytes:
        """Повертає весь вміст файлу."""

    @abstractmethod
    def write_all(self, path: str, data: bytes) -> None:
        """Записує data у файл, замінюючи попередній вміст."""

    @abstractmethod
    def ensure_dir(self, path: str) -> None:
        """Створює теку разом з усіма батьківськими."""

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        pass

    @abstractmethod
    def is_file(self, path: str) -> bool:
        pass

    @abstractmethod
    def size(self, path: str) -> int:
        pass


class LocalFileSystem(FileSystem):
    """FileSystem over the local disk. OSError is reported as ArchiveIOError."""

    def list_files(self, root: str) -> List[FileEntry]:
        if not os.path.isdir(root):
            raise ArchiveIOError(f"Folder not found: {root}")

        files = []
        for dir_path, _, file_names in os.walk(root):
            for name in file_names:
                absolute_path = os.path.join(dir_path, name)
                if not os.path.isfile(absolute_path):
                    continue
                relative_path = os.path.relpath(absolute_path, root)
                relative_path = relative_path.replace(os.sep, "/").replace("\\", "/")
                files.append(
                    FileEntry(relative_path, absolute_path, self.size(absolute_path))
                )

        files.sort(key=lambda entry: entry.relative_path)
        return files

    def read_all(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as exc:
            raise ArchiveIOError(f"Cannot read {path}: {exc.strerror or exc}") from exc

    def write_all(self, path: str, data: bytes) -> None:
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as exc:
            raise ArchiveIOError(f"Cannot write {path}: {exc.strerror or exc}") from exc

    def ensure_dir(self, path: str) -> None:
        if not path:
            return
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as exc:
            raise ArchiveIOError(f"Cannot create folder {path}: {exc.strerror or exc}") from exc

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def size(self, path: str) -> int:
        try:
            return os.path.getsize(path)
        except OSError as exc:
            raise ArchiveIOError(f"Cannot stat {path}: {exc.strerror or exc}") from exc
