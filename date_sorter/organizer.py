"""
Модуль обхода дерева каталогов.

Рекурсивно обходит исходный каталог и для каждого файла определяет дату
и перемещает его в каталог <год>/<месяц> под корнем назначения.
"""

import stat
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

from .config_loader import Config
from .logger import DateSorterLogger
from .date_resolver import DateResolver, SOURCE_METADATA
from .file_ops import FileOps


class OrganizeError(Exception):
    """Исключение для ошибок раскладки файлов."""
    pass


class OrganizeStats:
    """Класс для хранения статистики раскладки."""

    def __init__(self):
        self.directories_scanned = 0
        self.skipped_directories = 0
        self.files_processed = 0
        self.files_moved = 0
        self.files_in_place = 0
        self.files_overwritten = 0
        self.metadata_dated = 0
        self.filesystem_dated = 0
        self.start_time = None
        self.end_time = None

    def get_duration(self) -> Optional[float]:
        """Возвращает продолжительность раскладки в секундах."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_dict(self) -> Dict:
        """Преобразует статистику в словарь."""
        return {
            'directories_scanned': self.directories_scanned,
            'skipped_directories': self.skipped_directories,
            'files_processed': self.files_processed,
            'files_moved': self.files_moved,
            'files_in_place': self.files_in_place,
            'files_overwritten': self.files_overwritten,
            'metadata_dated': self.metadata_dated,
            'filesystem_dated': self.filesystem_dated,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.get_duration()
        }


class Organizer:
    """Основной класс для раскладки файлов по датам."""

    def __init__(self, config: Config, logger: DateSorterLogger,
                 resolver: Optional[DateResolver] = None,
                 file_ops: Optional[FileOps] = None):
        """
        Инициализация органайзера.

        Args:
            config: Конфигурация приложения
            logger: Логгер для записи операций
            resolver: Определитель дат (по умолчанию создается новый)
            file_ops: Операции с файлами (по умолчанию создаются новые)
        """
        self.config = config
        self.logger = logger
        self.resolver = resolver or DateResolver(logger)
        self.file_ops = file_ops or FileOps(config.paths.output_path, logger)
        self.stats = OrganizeStats()
        self._visited: Set[Tuple[int, int]] = set()

    def run(self) -> OrganizeStats:
        """
        Раскладывает все файлы исходного каталога.

        Returns:
            OrganizeStats: Статистика раскладки

        Raises:
            OrganizeError: Если обход прерван ошибкой
        """
        input_path = self.config.paths.input_path
        output_path = self.config.paths.output_path

        self.stats = OrganizeStats()
        self._visited = set()
        self.stats.start_time = datetime.now()
        self.logger.log_run_start(input_path, output_path)

        try:
            self.walk(input_path)
        except Exception as e:
            self.stats.end_time = datetime.now()
            self.logger.log_critical_error("Раскладка прервана", e)
            raise OrganizeError(f"Ошибка раскладки файлов: {e}")

        self.stats.end_time = datetime.now()
        self.logger.log_run_end(
            processed_files=self.stats.files_processed,
            moved_files=self.stats.files_moved,
            in_place_files=self.stats.files_in_place
        )
        return self.stats

    def walk(self, directory: Path) -> None:
        """
        Рекурсивно обходит каталог.

        Порядок обхода совпадает с порядком, в котором файловая система
        возвращает записи каталога.

        Args:
            directory: Каталог для обхода
        """
        directory = Path(directory)
        dir_stat = directory.stat()
        key = (dir_stat.st_dev, dir_stat.st_ino)
        if key in self._visited:
            # Символическая ссылка замкнула цикл
            self.stats.skipped_directories += 1
            self.logger.log_warning(f"Каталог уже обработан, пропускаем: {directory}")
            return
        self._visited.add(key)

        self.stats.directories_scanned += 1
        self.logger.log_directory_entered(directory)

        for entry_path in list(directory.iterdir()):
            entry_stat = entry_path.stat()
            if stat.S_ISDIR(entry_stat.st_mode):
                self.walk(entry_path)
            else:
                self.process_file(entry_path)

    def process_file(self, file_path: Path) -> None:
        """
        Определяет дату файла и перемещает его.

        Args:
            file_path: Путь к файлу
        """
        resolved = self.resolver.resolve(file_path)
        if resolved.source == SOURCE_METADATA:
            self.stats.metadata_dated += 1
        else:
            self.stats.filesystem_dated += 1

        result = self.file_ops.relocate(file_path, resolved.value)

        self.stats.files_processed += 1
        if result.performed:
            self.stats.files_moved += 1
        else:
            self.stats.files_in_place += 1
        if result.overwritten:
            self.stats.files_overwritten += 1


def create_organizer(config: Config, logger: DateSorterLogger) -> Organizer:
    """
    Удобная функция для создания объекта органайзера.

    Args:
        config: Конфигурация приложения
        logger: Логгер

    Returns:
        Organizer: Объект органайзера
    """
    return Organizer(config, logger)
