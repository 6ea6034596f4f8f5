"""Утилиты для работы в portable режиме."""

import sys
from pathlib import Path


def is_portable_mode() -> bool:
    """
    Определяет, запущено ли приложение в portable режиме.

    Portable режим активируется, если имя исполняемого файла содержит '_portable'.
    Например: tileloader_portable.exe

    """
    exe_name = Path(sys.argv[0]).name.lower()
    return '_portable' in exe_name


def get_portable_path(subdir: str) -> Path:
    """
    Возвращает путь к поддиректории рядом с исполняемым файлом.

    Args:
        subdir: Имя поддиректории (например, 'cache/tiles')

    """
    return Path(sys.argv[0]).resolve().parent / subdir
