"""
Модуль определения даты файла.

Дата берется из EXIF-поля DateTimeOriginal, если файл является изображением
с корректными метаданными. Во всех остальных случаях используется время
создания файла из файловой системы (или время изменения статуса, если
платформа не сообщает время создания).
"""

import io
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image, ExifTags

from .logger import DateSorterLogger


SOURCE_METADATA = 'metadata'
SOURCE_FILESYSTEM = 'filesystem'

EXIF_DATETIME_FORMAT = '%Y:%m:%d %H:%M:%S'


@dataclass(frozen=True)
class ResolvedDate:
    """Дата файла и источник, из которого она получена."""
    value: datetime
    source: str


def parse_exif_datetime(raw: Union[str, bytes, None]) -> Optional[int]:
    """
    Переводит строку EXIF вида "YYYY:MM:DD HH:MM:SS" в Unix-время (секунды).

    Строка не содержит часового пояса и трактуется как UTC.

    Returns:
        int или None: Unix-время или None, если значение некорректно
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode('ascii', errors='ignore')
    text = str(raw).strip('\x00 \t\r\n')
    if len(text) < 19:
        return None
    try:
        stamp = datetime.strptime(text[:19], EXIF_DATETIME_FORMAT)
    except ValueError:
        return None
    return int(stamp.replace(tzinfo=timezone.utc).timestamp())


def read_capture_timestamp(data: Union[bytes, BinaryIO]) -> Optional[int]:
    """
    Извлекает DateTimeOriginal из содержимого файла.

    Любая ошибка разбора (не изображение, поврежденные метаданные,
    отсутствующее поле) дает None, исключения наружу не выходят.

    Args:
        data: Содержимое файла или открытый бинарный поток. Поток
            читается лениво: Pillow разбирает только заголовок.

    Returns:
        int или None: Unix-время съемки в секундах
    """
    if isinstance(data, bytes):
        data = io.BytesIO(data)
    try:
        with Image.open(data) as img:
            exif = img.getexif()
            raw = exif.get_ifd(ExifTags.IFD.Exif).get(ExifTags.Base.DateTimeOriginal)
            if raw is None:
                # Некоторые программы пишут поле прямо в IFD0
                raw = exif.get(ExifTags.Base.DateTimeOriginal)
    except Exception:
        return None
    return parse_exif_datetime(raw)


def date_from_timestamp(timestamp: float) -> datetime:
    """Переводит Unix-время в локальную дату и время хоста."""
    return datetime.fromtimestamp(timestamp)


def filesystem_date(stat_result: os.stat_result) -> datetime:
    """
    Возвращает дату файла по данным файловой системы.

    Args:
        stat_result: Результат os.stat()

    Returns:
        datetime: Время создания (st_birthtime), а если платформа его
        не сообщает, время изменения статуса (st_ctime)
    """
    birthtime = getattr(stat_result, 'st_birthtime', None)
    if birthtime:
        return date_from_timestamp(birthtime)
    return date_from_timestamp(stat_result.st_ctime)


class DateResolver:
    """Определяет дату файла: сначала EXIF, затем файловая система."""

    def __init__(self, logger: DateSorterLogger):
        self.logger = logger

    def read_capture_date(self, file_path: Path) -> Optional[datetime]:
        """
        Пытается получить дату съемки из метаданных файла.

        Args:
            file_path: Путь к файлу

        Returns:
            datetime или None: Дата съемки или None, если ее нет
        """
        try:
            with file_path.open('rb') as stream:
                timestamp = read_capture_timestamp(stream)
        except OSError as e:
            self.logger.log_metadata_fallback(file_path, str(e))
            return None

        if timestamp is None:
            self.logger.log_metadata_fallback(file_path, "DateTimeOriginal отсутствует")
            return None

        try:
            return date_from_timestamp(timestamp)
        except (OverflowError, OSError, ValueError) as e:
            self.logger.log_metadata_fallback(file_path, f"некорректная дата съемки: {e}")
            return None

    def resolve(self, file_path: Path) -> ResolvedDate:
        """
        Определяет дату файла.

        Args:
            file_path: Путь к файлу

        Returns:
            ResolvedDate: Дата файла (всегда определена)

        Raises:
            OSError: Если не удалось получить stat файла
        """
        capture_date = self.read_capture_date(file_path)
        if capture_date is not None:
            resolved = ResolvedDate(capture_date, SOURCE_METADATA)
        else:
            resolved = ResolvedDate(filesystem_date(file_path.stat()), SOURCE_FILESYSTEM)

        self.logger.log_date_resolved(file_path, resolved.value, resolved.source)
        return resolved
