"""
Модуль для операций с файловой системой.

Обеспечивает перемещение файлов в структуру каталогов <год>/<месяц>
под корнем назначения.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from datetime import datetime
from typing import Union

from .logger import DateSorterLogger


class FileOperationError(Exception):
    """Исключение для ошибок операций с файлами."""
    pass


@dataclass(frozen=True)
class MoveResult:
    """Результат перемещения одного файла."""
    source: Path
    target: Path
    performed: bool  # False если файл уже на месте
    overwritten: bool = False


class FileOps:
    """Класс для операций с файловой системой."""

    def __init__(self, output_path: Union[str, Path], logger: DateSorterLogger):
        """
        Инициализация операций с файлами.

        Args:
            output_path: Корень назначения
            logger: Логгер для записи операций
        """
        self.output_path = Path(output_path)
        self.logger = logger

    def get_date_directory(self, dt: datetime) -> Path:
        """
        Получает путь к каталогу по дате в формате YYYY/MM.

        Args:
            dt: Дата файла

        Returns:
            Path: Путь к каталогу по дате
        """
        return self.output_path / f"{dt.year:04d}" / f"{dt.month:02d}"

    def get_target_path(self, source_path: Path, dt: datetime) -> Path:
        """Возвращает путь назначения с исходным именем файла."""
        return self.get_date_directory(dt) / source_path.name

    def ensure_date_directory(self, dt: datetime) -> Path:
        """
        Создает каталог по дате если он не существует.

        Args:
            dt: Дата файла

        Returns:
            Path: Путь к каталогу

        Raises:
            FileOperationError: Если каталог создать не удалось
        """
        date_dir = self.get_date_directory(dt)
        try:
            date_dir.mkdir(parents=True, exist_ok=True)
            return date_dir
        except OSError as e:
            self.logger.log_file_error(date_dir, e)
            raise FileOperationError(f"Ошибка создания каталога по дате {date_dir}: {e}")

    def relocate(self, source_path: Union[str, Path], dt: datetime) -> MoveResult:
        """
        Перемещает файл в каталог по дате.

        Если в каталоге назначения уже есть файл с тем же именем, он
        заменяется (побеждает последняя запись).

        Args:
            source_path: Путь к исходному файлу
            dt: Дата файла

        Returns:
            MoveResult: Исходный и целевой пути, признак перемещения

        Raises:
            FileOperationError: Если произошла ошибка при перемещении
        """
        source_path = Path(source_path)
        self.ensure_date_directory(dt)
        target_path = self.get_target_path(source_path, dt)
        overwritten = False

        try:
            if target_path.exists():
                if target_path.samefile(source_path):
                    self.logger.log_file_in_place(target_path)
                    return MoveResult(source_path, target_path, performed=False)

                if target_path.is_dir():
                    raise FileOperationError(f"Путь назначения занят каталогом: {target_path}")

                # Старый файл заменяется самим перемещением
                self.logger.log_file_overwritten(target_path)
                overwritten = True

            shutil.move(str(source_path), str(target_path))

        except FileOperationError as e:
            self.logger.log_file_error(source_path, e)
            raise
        except OSError as e:
            self.logger.log_file_error(source_path, e)
            raise FileOperationError(f"Ошибка перемещения файла {source_path}: {e}")

        self.logger.log_file_moved(source_path, target_path)
        return MoveResult(source_path, target_path, performed=True, overwritten=overwritten)
