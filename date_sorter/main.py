"""
Главный модуль CLI интерфейса утилиты раскладки файлов по датам.

Использование:
    date-sorter <исходный каталог> <каталог назначения> [--config FILE] [--verbose]
"""

import argparse
import sys
from typing import List, Optional

from .config_loader import load_config
from .logger import DateSorterLogger
from .organizer import Organizer, create_organizer


class DateSorterCLI:
    """Класс для обработки команд CLI."""

    def __init__(self):
        self.config = None
        self.logger = None
        self.organizer: Optional[Organizer] = None

    def setup(self, input_path: Optional[str], output_path: Optional[str],
              config_path: Optional[str] = None, verbose: bool = False) -> None:
        """
        Инициализирует CLI: конфигурацию, логгер и органайзер.

        Файлы на этом шаге не затрагиваются.

        Args:
            input_path: Исходный каталог
            output_path: Каталог назначения
            config_path: Путь к файлу конфигурации (необязательный)
            verbose: Подробный вывод (уровень DEBUG)

        Raises:
            FileNotFoundError: Если файл конфигурации не найден
            ValueError: Если аргументы или конфигурация некорректны
        """
        self.config = load_config(input_path, output_path, config_path)
        if verbose:
            self.config.logging.level = 'DEBUG'

        self.logger = DateSorterLogger(self.config.logging)
        self.organizer = create_organizer(self.config, self.logger)

        if config_path:
            self.logger.log_system_info(f"Конфигурация загружена из: {config_path}")

    def cmd_organize(self) -> int:
        """
        Раскладывает файлы и выводит итоговую статистику.

        Returns:
            int: Код возврата (0 - успех)
        """
        summary = self.organizer.run().to_dict()

        print("\n✅ Раскладка файлов завершена!")
        print("📊 Статистика:")
        print(f"   • Каталогов просмотрено: {summary['directories_scanned']}")
        print(f"   • Файлов обработано: {summary['files_processed']}")
        print(f"   • Перемещено: {summary['files_moved']}")
        print(f"   • Уже на месте: {summary['files_in_place']}")
        print(f"   • Перезаписано: {summary['files_overwritten']}")
        print(f"   • Дата из EXIF: {summary['metadata_dated']}")
        print(f"   • Дата из файловой системы: {summary['filesystem_dated']}")
        if summary['skipped_directories']:
            print(f"   • Пропущено каталогов (циклы ссылок): {summary['skipped_directories']}")
        if summary['duration_seconds'] is not None:
            print(f"   • Продолжительность: {summary['duration_seconds']:.2f} сек")

        return 0


def create_parser() -> argparse.ArgumentParser:
    """
    Создает парсер аргументов командной строки.

    Returns:
        argparse.ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog='date-sorter',
        description="Утилита раскладки файлов по каталогам <год>/<месяц> по дате съемки",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  # Разложить фотографии из ~/Camera в ~/Photos/YYYY/MM
  date-sorter ~/Camera ~/Photos

  # С настройками логирования из файла
  date-sorter ~/Camera ~/Photos --config config/settings.ini

Файлы с одинаковым именем в одном месяце перезаписываются.
        """
    )

    parser.add_argument(
        'input_path',
        nargs='?',
        help='Исходный каталог'
    )
    parser.add_argument(
        'output_path',
        nargs='?',
        help='Каталог назначения'
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Путь к файлу конфигурации (например: config/settings.ini)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    cli = DateSorterCLI()

    try:
        cli.setup(args.input_path, args.output_path, args.config, args.verbose)
        return cli.cmd_organize()

    except KeyboardInterrupt:
        print("\n⚠️ Операция прервана пользователем", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ Ошибка: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
