"""Кодирование буфера в файл без потерь и его запись на диск.

Принципы:
- SRP: кодирование и запись — единственные обязанности класса.
- Запись атомарна: сначала все байты в памяти, затем временный файл и `os.replace`,
  поэтому при сбое целевой файл остаётся либо старым, либо новым целиком.
"""
from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
from pathlib import Path

from PIL import Image

from image_to_alpha.errors import EncodeError, WriteError
from image_to_alpha.models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Только форматы без потерь с поддержкой альфы
_FORMATS_BY_SUFFIX = {
    ".png": "PNG",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}
_MODES_BY_BPP = {3: "RGB", 4: "RGBA"}


class ExportService:
    def format_for(self, file_path: str | Path) -> str:
        return _FORMATS_BY_SUFFIX.get(Path(file_path).suffix.lower(), "PNG")

    def encode(self, buffer: PixelBuffer, image_format: str = "PNG") -> bytes:
        """Сериализует буфер в байты указанного формата (по умолчанию PNG).

        Raises:
            EncodeError: форма буфера или формат не поддерживаются.
        """
        mode = _MODES_BY_BPP.get(buffer.bytes_per_pixel)
        if mode is None:
            raise EncodeError(image_format, f"{buffer.bytes_per_pixel} байт на пиксель не поддерживается")
        if buffer.width == 0 or buffer.height == 0:
            raise EncodeError(image_format, f"пустое изображение {buffer.width}x{buffer.height}")

        try:
            # raw-декодер принимает stride и сам пропускает байты выравнивания
            image = Image.frombytes(
                mode,
                (buffer.width, buffer.height),
                bytes(buffer.data[: buffer.byte_length]),
                "raw",
                mode,
                buffer.stride,
            )
            stream = io.BytesIO()
            image.save(stream, format=image_format)
        except (KeyError, OSError, ValueError) as exc:
            raise EncodeError(image_format, str(exc)) from exc
        return stream.getvalue()

    def write_bytes(self, data: bytes, file_path: str | Path) -> None:
        """Атомарно записывает `data` в `file_path`.

        Raises:
            WriteError: нет доступа, нет каталога, закончилось место и т.п.
        """
        path = Path(file_path)
        tmp_path = None
        try:
            tmp_fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(tmp_fd, "wb") as tmp:
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            if path.exists():
                shutil.copymode(path, tmp_path)
            os.replace(tmp_path, path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise WriteError(path, exc) from exc
        logger.debug("Записано %d байт в %s", len(data), path)

    def save(self, buffer: PixelBuffer, file_path: str | Path) -> None:
        """Кодирует буфер в формат по расширению `file_path` и атомарно записывает его."""
        image_format = self.format_for(file_path)
        logger.debug("Кодирование в %s", image_format)
        data = self.encode(buffer, image_format)
        self.write_bytes(data, file_path)
