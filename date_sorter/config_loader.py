"""
Модуль для загрузки и валидации конфигурации приложения.

Собирает параметры запуска из аргументов командной строки и необязательного
INI-файла (config/settings.ini) в один объект Config, который создается
один раз при старте и передается всем компонентам.
"""

import configparser
from pathlib import Path
from typing import Optional, Union
from dataclasses import dataclass, field


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class PathsConfig:
    """Конфигурация путей: исходный каталог и корень назначения."""
    input_path: Path
    output_path: Path


@dataclass
class LoggingConfig:
    """Конфигурация логирования."""
    level: str = 'INFO'
    log_file: Optional[Path] = None
    max_log_size: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Основная конфигурация приложения."""
    paths: PathsConfig
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Класс для загрузки и валидации конфигурации."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Инициализация загрузчика конфигурации.

        Args:
            config_path: Путь к INI-файлу (необязательный)
        """
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None
        self._input_path: Optional[str] = None
        self._output_path: Optional[str] = None

    def load_config(self, input_path: Optional[str] = None,
                    output_path: Optional[str] = None) -> Config:
        """
        Загружает конфигурацию.

        Пути из командной строки имеют приоритет над секцией [paths] файла.

        Args:
            input_path: Исходный каталог
            output_path: Корень назначения

        Returns:
            Config: Объект конфигурации

        Raises:
            FileNotFoundError: Если указанный файл конфигурации не найден
            ValueError: Если конфигурация некорректна
        """
        self._input_path = input_path
        self._output_path = output_path

        parser = configparser.ConfigParser()
        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Файл конфигурации не найден: {self.config_path}")
            parser.read(self.config_path, encoding='utf-8')

        try:
            paths_config = self._load_paths_config(parser, input_path, output_path)
            logging_config = self._load_logging_config(parser)
        except (configparser.Error, ValueError) as e:
            raise ValueError(f"Ошибка загрузки конфигурации: {e}")

        self._config = Config(paths=paths_config, logging=logging_config)
        self._validate_config()

        return self._config

    def _load_paths_config(self, parser: configparser.ConfigParser,
                           input_path: Optional[str],
                           output_path: Optional[str]) -> PathsConfig:
        """Загружает конфигурацию путей."""
        section = 'paths'

        input_path = input_path or parser.get(section, 'input_path', fallback=None)
        output_path = output_path or parser.get(section, 'output_path', fallback=None)

        if not input_path or not output_path:
            raise ValueError("Необходимо указать исходный каталог и каталог назначения")

        return PathsConfig(
            input_path=Path(input_path).expanduser(),
            output_path=Path(output_path).expanduser()
        )

    def _load_logging_config(self, parser: configparser.ConfigParser) -> LoggingConfig:
        """Загружает конфигурацию логирования."""
        section = 'logging'

        if not parser.has_section(section):
            return LoggingConfig()

        log_file = parser.get(section, 'log_file', fallback='')

        return LoggingConfig(
            level=parser.get(section, 'level', fallback='INFO'),
            log_file=Path(log_file) if log_file else None,
            max_log_size=parser.getint(section, 'max_log_size', fallback=10),
            backup_count=parser.getint(section, 'backup_count', fallback=5)
        )

    def _validate_config(self) -> None:
        """Валидирует загруженную конфигурацию."""
        if not self._config:
            raise ValueError("Конфигурация не загружена")

        # Проверка путей
        input_path = self._config.paths.input_path
        if not input_path.exists():
            raise ValueError(f"Исходный каталог не существует: {input_path}")
        if not input_path.is_dir():
            raise ValueError(f"Исходный путь не является каталогом: {input_path}")

        # Проверка параметров логирования
        if self._config.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Некорректный уровень логирования: {self._config.logging.level}")

        if self._config.logging.max_log_size <= 0:
            raise ValueError("Размер файла лога должен быть больше 0")

        if self._config.logging.backup_count < 0:
            raise ValueError("Количество архивных логов не может быть отрицательным")

    def get_config(self) -> Config:
        """
        Возвращает загруженную конфигурацию.

        Raises:
            ValueError: Если конфигурация не загружена
        """
        if self._config is None:
            raise ValueError("Конфигурация не загружена. Вызовите load_config() сначала.")
        return self._config

    def reload_config(self) -> Config:
        """Перезагружает конфигурацию с теми же путями из командной строки."""
        self._config = None
        return self.load_config(self._input_path, self._output_path)


def load_config(input_path: Optional[str] = None,
                output_path: Optional[str] = None,
                config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Удобная функция для быстрой загрузки конфигурации.

    Args:
        input_path: Исходный каталог
        output_path: Корень назначения
        config_path: Путь к INI-файлу (необязательный)

    Returns:
        Config: Объект конфигурации
    """
    loader = ConfigLoader(config_path)
    return loader.load_config(input_path, output_path)
