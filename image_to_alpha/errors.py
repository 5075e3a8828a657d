"""Ошибки конвейера load -> transform -> encode -> write.

Каждая ошибка терминальна для текущего запуска и несёт человекочитаемое сообщение
с путём или операцией, на которой произошёл сбой.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class ConversionError(Exception):
    """Базовый класс всех ошибок преобразования."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class LoadError(ConversionError):
    def __init__(self, path: Path, reason: str = "") -> None:
        message = f"Не удалось загрузить изображение {path}. Убедитесь, что это корректный PNG-файл."
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path)


class DimensionError(ConversionError):
    def __init__(self, path: Optional[Path] = None, reason: str = "") -> None:
        message = "Не удалось определить размеры изображения в пикселях"
        if path is not None:
            message = f"{message}: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path)


class BitmapCreationError(ConversionError):
    def __init__(self, width: int, height: int, reason: str = "") -> None:
        message = f"Не удалось создать растровый буфер {width}x{height}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class RenderError(ConversionError):
    def __init__(self, path: Optional[Path] = None, reason: str = "") -> None:
        message = "Не удалось отрисовать изображение в буфер"
        if path is not None:
            message = f"{message}: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path)


class BufferAccessError(ConversionError):
    def __init__(self, reason: str = "") -> None:
        message = "Нет доступа к данным буфера"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class EncodeError(ConversionError):
    def __init__(self, image_format: str, reason: str = "") -> None:
        message = f"Не удалось закодировать данные в {image_format}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.image_format = image_format


class WriteError(ConversionError):
    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Не удалось записать изображение в {path}: {cause}", path)
        self.cause = cause
