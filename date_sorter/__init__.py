"""
Date Sorter Utility

Утилита для раскладки файлов по каталогам <год>/<месяц> по дате съемки
(EXIF DateTimeOriginal) или по времени создания файла.
"""

__version__ = "1.0.0"
__author__ = "Date Sorter Team"
__description__ = "Utility for sorting files into year/month folders by capture date"
