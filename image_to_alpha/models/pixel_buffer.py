"""Модели данных для растрового буфера.

Принципы:
- SRP: только структура данных и её инварианты, без логики обработки.
- Буфер владеет непрерывной областью байтов; numpy-представления — лишь окна в неё.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class ImageDimensions:
    """Неизменяемые размеры изображения в пикселях."""
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Недопустимые размеры: {self.width}x{self.height}")

    @classmethod
    def from_size(cls, size: Tuple[int, int]) -> "ImageDimensions":
        width, height = size
        return cls(width=int(width), height=int(height))

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass
class PixelBuffer:
    """Изменяемый буфер пикселей 8 бит на канал, построчно (row-major).

    Fields:
        width: Ширина, px.
        height: Высота, px.
        stride: Байт на строку; может превышать `width * bytes_per_pixel` из-за выравнивания.
        bytes_per_pixel: 4 для RGBA, 3 для RGB.
        data: Сырые байты, не короче `stride * height`.
    """
    width: int
    height: int
    stride: int
    bytes_per_pixel: int = 4
    data: bytearray = field(default_factory=bytearray, repr=False)

    def __post_init__(self) -> None:
        self.check()

    @classmethod
    def allocate(
        cls,
        dimensions: ImageDimensions,
        bytes_per_pixel: int = 4,
        alignment: int = 16,
    ) -> "PixelBuffer":
        """Создаёт новый буфер, заполненный прозрачным чёрным (все байты 0)."""
        if alignment < 1:
            raise ValueError(f"Выравнивание должно быть положительным: {alignment}")
        row_bytes = dimensions.width * bytes_per_pixel
        stride = -(-row_bytes // alignment) * alignment
        return cls(
            width=dimensions.width,
            height=dimensions.height,
            stride=stride,
            bytes_per_pixel=bytes_per_pixel,
            data=bytearray(stride * dimensions.height),
        )

    @property
    def dimensions(self) -> ImageDimensions:
        return ImageDimensions(self.width, self.height)

    @property
    def row_bytes(self) -> int:
        return self.width * self.bytes_per_pixel

    @property
    def byte_length(self) -> int:
        return self.stride * self.height

    def check(self) -> None:
        """Проверяет инварианты буфера; нарушение — ошибка программиста."""
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Недопустимые размеры буфера: {self.width}x{self.height}")
        if self.bytes_per_pixel < 1:
            raise ValueError(f"Недопустимое число байт на пиксель: {self.bytes_per_pixel}")
        if self.stride < self.row_bytes:
            raise ValueError(f"stride={self.stride} меньше длины строки {self.row_bytes}")
        if len(self.data) < self.byte_length:
            raise ValueError(f"Буфер короче stride * height: {len(self.data)} < {self.byte_length}")

    def rows(self) -> np.ndarray:
        """Окно (height, stride) uint8 поверх `data`, включая байты выравнивания."""
        flat = np.frombuffer(self.data, dtype=np.uint8, count=self.byte_length)
        return flat.reshape(self.height, self.stride)

    def pixels(self) -> np.ndarray:
        """Окно (height, width, bytes_per_pixel) без байтов выравнивания."""
        return self.rows()[:, : self.row_bytes].reshape(self.height, self.width, self.bytes_per_pixel)
