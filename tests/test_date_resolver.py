"""
Тесты для модуля date_resolver.py
"""

import io
import pytest
import tempfile
import shutil
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock, patch

from PIL import Image, ExifTags

from date_sorter.date_resolver import (
    DateResolver,
    ResolvedDate,
    SOURCE_METADATA,
    SOURCE_FILESYSTEM,
    parse_exif_datetime,
    read_capture_timestamp,
    filesystem_date,
)
from date_sorter.logger import DateSorterLogger


NEW_YEAR_2021 = 1609459200  # 2021-01-01T00:00:00Z


def make_jpeg(date_string=None, in_ifd0=False) -> bytes:
    """Создает JPEG с заданным DateTimeOriginal."""
    img = Image.new('RGB', (8, 8), 'red')
    buffer = io.BytesIO()
    if date_string is None:
        img.save(buffer, format='JPEG')
        return buffer.getvalue()

    exif = Image.Exif()
    if in_ifd0:
        exif[ExifTags.Base.DateTimeOriginal] = date_string
    else:
        exif[ExifTags.IFD.Exif] = {ExifTags.Base.DateTimeOriginal: date_string}
    img.save(buffer, format='JPEG', exif=exif)
    return buffer.getvalue()


class TestParseExifDatetime:
    """Тесты для parse_exif_datetime."""

    def test_valid_string(self):
        """Тест корректной строки EXIF."""
        assert parse_exif_datetime("2021:01:01 00:00:00") == NEW_YEAR_2021

    def test_bytes_with_trailing_null(self):
        """Тест значения в байтах с завершающим нулем."""
        assert parse_exif_datetime(b"2021:01:01 00:00:00\x00") == NEW_YEAR_2021

    def test_zero_date(self):
        """Тест пустой даты, которую пишут некоторые камеры."""
        assert parse_exif_datetime("0000:00:00 00:00:00") is None

    def test_garbage(self):
        """Тест мусорных значений."""
        assert parse_exif_datetime(None) is None
        assert parse_exif_datetime("") is None
        assert parse_exif_datetime("not a date at all!!") is None
        assert parse_exif_datetime("2021-01-01T00:00:00") is None


class TestReadCaptureTimestamp:
    """Тесты для read_capture_timestamp."""

    def test_exif_ifd(self):
        """Тест поля DateTimeOriginal в Exif IFD."""
        data = make_jpeg("2021:01:01 00:00:00")
        assert read_capture_timestamp(data) == NEW_YEAR_2021

    def test_ifd0(self):
        """Тест поля DateTimeOriginal, записанного в IFD0."""
        data = make_jpeg("2021:01:01 00:00:00", in_ifd0=True)
        assert read_capture_timestamp(data) == NEW_YEAR_2021

    def test_image_without_exif(self):
        """Тест изображения без метаданных."""
        assert read_capture_timestamp(make_jpeg()) is None

    def test_not_an_image(self):
        """Тест файла, который не является изображением."""
        assert read_capture_timestamp(b"just some text\n") is None
        assert read_capture_timestamp(b"") is None

    def test_truncated_image(self):
        """Тест обрезанного изображения."""
        data = make_jpeg("2021:01:01 00:00:00")
        assert read_capture_timestamp(data[:24]) is None

    def test_invalid_date_value(self):
        """Тест некорректного значения поля."""
        data = make_jpeg("0000:00:00 00:00:00")
        assert read_capture_timestamp(data) is None


class TestFilesystemDate:
    """Тесты для filesystem_date."""

    def test_prefers_birthtime(self):
        """Тест использования времени создания."""
        stat_result = SimpleNamespace(st_birthtime=1592222400.0, st_ctime=1700000000.0)
        assert filesystem_date(stat_result) == datetime.fromtimestamp(1592222400.0)

    def test_falls_back_to_ctime(self):
        """Тест использования st_ctime без времени создания."""
        stat_result = SimpleNamespace(st_ctime=1700000000.0)
        assert filesystem_date(stat_result) == datetime.fromtimestamp(1700000000.0)

    def test_zero_birthtime(self):
        """Тест нулевого времени создания."""
        stat_result = SimpleNamespace(st_birthtime=0, st_ctime=1700000000.0)
        assert filesystem_date(stat_result) == datetime.fromtimestamp(1700000000.0)


class TestDateResolver:
    """Тесты для класса DateResolver."""

    @pytest.fixture
    def temp_dir(self):
        """Создает временную директорию для тестов."""
        temp_path = tempfile.mkdtemp()
        yield Path(temp_path)
        shutil.rmtree(temp_path, ignore_errors=True)

    @pytest.fixture
    def mock_logger(self):
        """Создает мок логгера."""
        return Mock(spec=DateSorterLogger)

    @pytest.fixture
    def resolver(self, mock_logger):
        return DateResolver(mock_logger)

    def test_resolve_from_metadata(self, resolver, temp_dir, mock_logger):
        """Тест определения даты по EXIF."""
        photo = temp_dir / "photo.jpg"
        photo.write_bytes(make_jpeg("2021:01:01 00:00:00"))

        resolved = resolver.resolve(photo)

        assert resolved == ResolvedDate(datetime.fromtimestamp(NEW_YEAR_2021), SOURCE_METADATA)
        mock_logger.log_date_resolved.assert_called_once_with(photo, resolved.value, SOURCE_METADATA)

    def test_resolve_from_filesystem(self, resolver, temp_dir, mock_logger):
        """Тест определения даты по файловой системе."""
        note = temp_dir / "note.txt"
        note.write_text("no metadata here")

        resolved = resolver.resolve(note)

        assert resolved.source == SOURCE_FILESYSTEM
        assert resolved.value == filesystem_date(note.stat())
        mock_logger.log_metadata_fallback.assert_called_once()

    def test_resolve_image_without_date(self, resolver, temp_dir):
        """Тест изображения без DateTimeOriginal."""
        photo = temp_dir / "plain.jpg"
        photo.write_bytes(make_jpeg())

        resolved = resolver.resolve(photo)

        assert resolved.source == SOURCE_FILESYSTEM

    def test_resolve_unreadable_file(self, resolver, temp_dir, mock_logger):
        """Тест файла, который не удалось прочитать."""
        photo = temp_dir / "locked.jpg"
        photo.write_bytes(make_jpeg("2021:01:01 00:00:00"))

        with patch.object(Path, 'open', side_effect=PermissionError("denied")):
            resolved = resolver.resolve(photo)

        assert resolved.source == SOURCE_FILESYSTEM
        mock_logger.log_metadata_fallback.assert_called_once_with(photo, "denied")

    def test_resolve_does_not_read_whole_file(self, resolver, temp_dir):
        """Тест: метаданные читаются из потока, файл целиком не загружается."""
        photo = temp_dir / "photo.jpg"
        photo.write_bytes(make_jpeg("2021:01:01 00:00:00") + b"\x00" * 1024 * 1024)

        with patch.object(Path, 'read_bytes') as mock_read_bytes:
            resolved = resolver.resolve(photo)

        mock_read_bytes.assert_not_called()
        assert resolved.source == SOURCE_METADATA

    def test_read_capture_timestamp_from_stream(self, temp_dir):
        """Тест чтения даты съемки из открытого файла."""
        photo = temp_dir / "photo.jpg"
        photo.write_bytes(make_jpeg("2021:01:01 00:00:00"))

        with photo.open('rb') as stream:
            assert read_capture_timestamp(stream) == NEW_YEAR_2021

    def test_resolve_out_of_range_date(self, resolver, temp_dir):
        """Тест даты съемки, которую нельзя перевести в локальное время."""
        photo = temp_dir / "photo.jpg"
        photo.write_bytes(make_jpeg("2021:01:01 00:00:00"))

        with patch('date_sorter.date_resolver.date_from_timestamp',
                   side_effect=[OverflowError("out of range"), datetime(2020, 6, 15)]):
            resolved = resolver.resolve(photo)

        assert resolved == ResolvedDate(datetime(2020, 6, 15), SOURCE_FILESYSTEM)

    def test_resolve_missing_file(self, resolver, temp_dir):
        """Тест отсутствующего файла: ошибка stat не подавляется."""
        with pytest.raises(FileNotFoundError):
            resolver.resolve(temp_dir / "missing.txt")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
