"""
Модуль для настройки и управления логированием приложения.

Обеспечивает централизованную настройку логирования с цветным выводом
в консоль и необязательной записью в файл с ротацией.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

from .config_loader import LoggingConfig


LOGGER_NAME = 'date_sorter'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Форматтер с цветным выводом для консоли."""

    # Цветовые коды ANSI
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Форматирует запись лога с цветом."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Запись разделяется с файловым обработчиком
            record.levelname = levelname


class DateSorterLogger:
    """Класс для управления логированием приложения Date Sorter."""

    def __init__(self, config: LoggingConfig):
        """
        Инициализация логгера.

        Args:
            config: Конфигурация логирования
        """
        self.config = config
        self.logger: Optional[logging.Logger] = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Настраивает логгер с консольным и (при необходимости) файловым выводом."""
        level = getattr(logging, self.config.level.upper())

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)

        # Очищаем существующие обработчики
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ColoredFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        console_handler.setLevel(level)
        self.logger.addHandler(console_handler)

        if self.config.log_file:
            log_file_path = Path(self.config.log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file_path,
                maxBytes=self.config.max_log_size * 1024 * 1024,  # Конвертируем MB в байты
                backupCount=self.config.backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            file_handler.setLevel(level)
            self.logger.addHandler(file_handler)

        # Предотвращаем дублирование сообщений
        self.logger.propagate = False

    def get_logger(self) -> logging.Logger:
        """
        Возвращает настроенный логгер.

        Returns:
            logging.Logger: Настроенный логгер
        """
        if self.logger is None:
            raise RuntimeError("Логгер не инициализирован")
        return self.logger

    def log_run_start(self, input_path: Path, output_path: Path) -> None:
        """
        Логирует начало раскладки файлов.

        Args:
            input_path: Исходный каталог
            output_path: Корень назначения
        """
        self.logger.info("🚀 Начало раскладки файлов по датам")
        self.logger.info(f"📂 Исходный каталог: {input_path}")
        self.logger.info(f"📁 Каталог назначения: {output_path}")
        self.logger.info(f"⏰ Время начала: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_run_end(self, processed_files: int, moved_files: int, in_place_files: int) -> None:
        """
        Логирует завершение раскладки.

        Args:
            processed_files: Обработано файлов
            moved_files: Перемещено файлов
            in_place_files: Файлов, уже лежащих на своем месте
        """
        self.logger.info("✅ Раскладка файлов завершена")
        self.logger.info("📊 Статистика:")
        self.logger.info(f"   • Обработано: {processed_files}")
        self.logger.info(f"   • Перемещено: {moved_files}")
        self.logger.info(f"   • Уже на месте: {in_place_files}")
        self.logger.info(f"⏰ Время завершения: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def log_directory_entered(self, directory: Path) -> None:
        """Логирует вход в каталог при обходе."""
        self.logger.debug(f"📂 Обход каталога: {directory}")

    def log_date_resolved(self, file_path: Path, resolved: datetime, source: str) -> None:
        """
        Логирует определенную дату файла.

        Args:
            file_path: Путь к файлу
            resolved: Дата файла
            source: Источник даты (metadata или filesystem)
        """
        self.logger.debug(f"📅 {file_path}: {resolved.isoformat()} ({source})")

    def log_metadata_fallback(self, file_path: Path, reason: str) -> None:
        """Логирует переход на дату файловой системы."""
        self.logger.debug(f"🔎 Нет даты съемки в {file_path}: {reason}")

    def log_file_moved(self, source_path: Path, target_path: Path) -> None:
        """
        Логирует успешное перемещение файла.

        Args:
            source_path: Исходный путь
            target_path: Целевой путь
        """
        self.logger.info(f"📁 Перемещен: {source_path} → {target_path}")

    def log_file_in_place(self, file_path: Path) -> None:
        """Логирует файл, который уже лежит в своем каталоге."""
        self.logger.info(f"📌 Уже на месте: {file_path}")

    def log_file_overwritten(self, target_path: Path) -> None:
        """Логирует замену существующего файла в каталоге назначения."""
        self.logger.warning(f"⚠️ Файл будет перезаписан: {target_path}")

    def log_file_error(self, file_path: Path, error: Exception) -> None:
        """
        Логирует ошибку при обработке файла.

        Args:
            file_path: Путь к файлу
            error: Исключение
        """
        self.logger.error(f"❌ Ошибка при обработке файла {file_path}: {error}")

    def log_system_info(self, info: str) -> None:
        """
        Логирует системную информацию.

        Args:
            info: Информационное сообщение
        """
        self.logger.info(f"ℹ️ {info}")

    def log_warning(self, message: str) -> None:
        """
        Логирует предупреждение.

        Args:
            message: Сообщение предупреждения
        """
        self.logger.warning(f"⚠️ {message}")

    def log_critical_error(self, message: str, error: Exception = None) -> None:
        """
        Логирует критическую ошибку.

        Args:
            message: Сообщение об ошибке
            error: Исключение (опционально)
        """
        if error:
            self.logger.critical(f"💥 {message}: {error}")
        else:
            self.logger.critical(f"💥 {message}")


def setup_logger(config: LoggingConfig) -> logging.Logger:
    """
    Удобная функция для быстрой настройки логгера.

    Args:
        config: Конфигурация логирования

    Returns:
        logging.Logger: Настроенный логгер
    """
    sorter_logger = DateSorterLogger(config)
    return sorter_logger.get_logger()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Получает логгер по имени."""
    return logging.getLogger(name)
