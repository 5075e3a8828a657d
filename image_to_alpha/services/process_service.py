from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from image_to_alpha.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Веса яркости Rec. 601 в одинарной точности: вся арифметика ведётся во float32.
LUMA_R = np.float32(0.299)
LUMA_G = np.float32(0.587)
LUMA_B = np.float32(0.114)

PARALLEL_MIN_PIXELS = 65_536


def luma(r: int, g: int, b: int) -> float:
    """Яркость одного пикселя, [0..255], вычисленная во float32."""
    return float(LUMA_R * np.float32(r) + LUMA_G * np.float32(g) + LUMA_B * np.float32(b))


def inverted_alpha(r: int, g: int, b: int) -> int:
    """Альфа шаблона для одного пикселя: 255 - int(яркость) с отбрасыванием дробной части."""
    return 255 - min(max(int(luma(r, g, b)), 0), 255)


class ProcessService:
    def to_alpha_template(self, buffer: PixelBuffer, workers: Optional[int] = None) -> None:
        """
        Преобразование буфера в шаблон на месте:
        - RGB каждого пикселя становится (0, 0, 0)
        - альфа = 255 - яркость, если в пикселе есть четвёртый байт
        Исходная альфа игнорируется.

        workers=None выбирает число потоков автоматически, 1 — строго последовательно.
        """
        buffer.check()
        if workers is not None and workers < 1:
            raise ValueError(f"Число потоков должно быть положительным: {workers}")
        if buffer.width == 0 or buffer.height == 0:
            return

        pixels = buffer.pixels()
        n_workers = self._resolve_workers(buffer, workers)
        if n_workers == 1:
            self._transform_rows(pixels, 0, buffer.height)
            return

        # Строки не пересекаются по памяти, поэтому синхронизация не нужна.
        # NumPy отпускает GIL на поэлементных операциях, потоки работают параллельно.
        chunk = (buffer.height + n_workers - 1) // n_workers
        ranges: List[Tuple[int, int]] = [
            (start, min(start + chunk, buffer.height)) for start in range(0, buffer.height, chunk)
        ]
        logger.debug("Обработка %d строк в %d потоках", buffer.height, len(ranges))
        with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
            futures: List[Future[None]] = [
                pool.submit(self._transform_rows, pixels, lo, hi) for lo, hi in ranges
            ]
            for fut in futures:
                fut.result()

    # ---------- Вспомогательные функции ----------
    def _resolve_workers(self, buffer: PixelBuffer, workers: Optional[int]) -> int:
        if workers is not None:
            return min(workers, buffer.height)
        cpu = max(1, os.cpu_count() or 1)
        # Для маленьких изображений накладные расходы потоков больше выигрыша
        if buffer.width * buffer.height < PARALLEL_MIN_PIXELS:
            return 1
        return min(cpu, buffer.height)

    def _transform_rows(self, pixels: np.ndarray, lo: int, hi: int) -> None:
        block = pixels[lo:hi]
        has_alpha = block.shape[2] >= 4
        if has_alpha:
            r = block[..., 0].astype(np.float32)
            g = block[..., 1].astype(np.float32)
            b = block[..., 2].astype(np.float32)
            brightness = LUMA_R * r + LUMA_G * g + LUMA_B * b
            # astype(uint8) отбрасывает дробную часть, как приведение к целому
            alpha = 255 - np.clip(brightness, 0, 255).astype(np.uint8)
        block[..., :3] = 0
        if has_alpha:
            block[..., 3] = alpha
