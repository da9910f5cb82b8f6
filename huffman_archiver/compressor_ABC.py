from abc import ABC, abstractmethod
import io
from typing import BinaryIO, Tuple


class Compressor(ABC):
    """
    Потоковий компресор одного файлу: архів пишеться у вихідний потік,
    а кожна операція повертає текстовий звіт для виводу в консоль.
    """

    @abstractmethod
    def compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Стискає весь вміст input_stream в архів.

        Args:
            input_stream: Потік з вихідними байтами
            output_stream: Потік, куди пишеться архів

        Returns:
            Звіт: кількість різних байтів, розміри, коефіцієнт стиснення
        """

    @abstractmethod
    def decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Відновлює байти з архіву.

        Args:
            input_stream: Потік, що починається з байта-мітки архіву
            output_stream: Потік для відновлених байтів

        Returns:
            Звіт про кількість відновлених байтів
        """

    @classmethod
    def compress_bytes(cls, data: bytes) -> Tuple[bytes, str]:
        """Стискає data в пам'яті. Повертає (архів, звіт)."""
        out_buffer = io.BytesIO()
        report = cls().compress(io.BytesIO(data), out_buffer)
        return out_buffer.getvalue(), report

    @classmethod
    def decompress_bytes(cls, archive: bytes) -> Tuple[bytes, str]:
        """Розпаковує archive в пам'яті. Повертає (дані, звіт)."""
        out_buffer = io.BytesIO()
        report = cls().decompress(io.BytesIO(archive), out_buffer)
        return out_buffer.getvalue(), report
