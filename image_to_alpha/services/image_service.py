"""Загрузка изображений с диска в буфер пикселей RGBA.

Принципы:
- SRP: класс отвечает только за декодирование и выбор представления.
- OCP: новые форматы добавляются плагинами Pillow, без правок этого модуля.
- Результат — свежий `PixelBuffer`, которым дальше владеет вызывающая сторона.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
from PIL import Image, UnidentifiedImageError

from image_to_alpha.errors import (
    BitmapCreationError,
    BufferAccessError,
    DimensionError,
    LoadError,
    RenderError,
)
from image_to_alpha.models.pixel_buffer import ImageDimensions, PixelBuffer

logger = logging.getLogger(__name__)

ROW_ALIGNMENT = 16


def _representation_area(size: Sequence[int]) -> int:
    # ICNS отдаёт (w, h, scale), ICO — (w, h)
    scale = size[2] if len(size) > 2 else 1
    return size[0] * scale * size[1] * scale


class ImageService:
    def __init__(self, alignment: int = ROW_ALIGNMENT) -> None:
        self.alignment = alignment

    def load_image(self, file_path: str | Path) -> PixelBuffer:
        """Загружает изображение с диска и возвращает его RGBA-буфер.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `PixelBuffer` 8 бит на канал, 4 байта на пиксель, размеров самого
            крупного из встроенных представлений.

        Raises:
            LoadError: если путь не существует или файл не распознан как изображение.
            DimensionError: если не удалось выбрать представление.
            BitmapCreationError: если не удалось выделить буфер.
            RenderError: если не удалось перенести пиксели в буфер.
            BufferAccessError: если недоступны сырые байты декодированного изображения.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise LoadError(path, "файл не найден")

        try:
            image = Image.open(path)
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
            raise LoadError(path, str(exc)) from exc

        with image:
            self._select_best_representation(image, path)
            try:
                rgba = image.convert("RGBA")
            except OSError as exc:
                # усечённые или повреждённые данные всплывают только при декодировании
                raise LoadError(path, str(exc)) from exc
            except ValueError as exc:
                raise RenderError(path, str(exc)) from exc

        dimensions = ImageDimensions.from_size(rgba.size)
        buffer = self._allocate(dimensions)
        self._render(rgba, buffer, path)
        logger.debug(
            "Загружено %s: %dx%d, stride=%d", path, buffer.width, buffer.height, buffer.stride
        )
        return buffer

    # ---------- Вспомогательные функции ----------
    def _select_best_representation(self, image: Image.Image, path: Path) -> None:
        """Переключает `image` на представление с наибольшей площадью."""
        sizes = image.info.get("sizes")
        if sizes:
            best = max(sizes, key=_representation_area)
            try:
                image.size = best
            except (AttributeError, ValueError) as exc:
                raise DimensionError(path, str(exc)) from exc
            logger.debug("Выбрано представление %s из %d", best, len(sizes))
            return

        n_frames = getattr(image, "n_frames", 1)
        if n_frames <= 1:
            return
        try:
            areas = []
            for index in range(n_frames):
                image.seek(index)
                areas.append(image.size[0] * image.size[1])
            best_index = max(range(n_frames), key=areas.__getitem__)
            image.seek(best_index)
        except (EOFError, OSError, ValueError) as exc:
            raise DimensionError(path, str(exc)) from exc
        logger.debug("Выбран кадр %d из %d", best_index, n_frames)

    def _allocate(self, dimensions: ImageDimensions) -> PixelBuffer:
        try:
            return PixelBuffer.allocate(dimensions, bytes_per_pixel=4, alignment=self.alignment)
        except (MemoryError, ValueError) as exc:
            raise BitmapCreationError(dimensions.width, dimensions.height, str(exc)) from exc

    def _render(self, rgba: Image.Image, buffer: PixelBuffer, path: Path) -> None:
        """Копирует пиксели в прозрачный буфер без смешивания с фоном."""
        try:
            raw = rgba.tobytes()
        except (OSError, ValueError) as exc:
            raise BufferAccessError(str(exc)) from exc

        try:
            source = np.frombuffer(raw, dtype=np.uint8).reshape(buffer.height, buffer.width, 4)
            buffer.pixels()[...] = source
        except ValueError as exc:
            raise RenderError(path, str(exc)) from exc
