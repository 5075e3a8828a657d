"""Контроллер преобразования: оркестрация сервисов загрузки, обработки и записи.

SOLID:
- SRP: класс только связывает этапы конвейера (без логики обработки изображений).
- DIP: зависит от сервисов как от ролей; конкретные реализации подставляются полями.
Clean Code:
- Этапы строго последовательны; запись начинается только после полной обработки буфера.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from image_to_alpha.models.pixel_buffer import ImageDimensions
from image_to_alpha.services.export_service import ExportService
from image_to_alpha.services.image_service import ImageService
from image_to_alpha.services.process_service import ProcessService

logger = logging.getLogger(__name__)


@dataclass
class ConvertController:
    """Выполняет полный конвейер load -> transform -> encode -> write.

    Ответственности:
    - Загрузка изображения через `ImageService`.
    - Преобразование в шаблон через `ProcessService`.
    - Кодирование и атомарная запись через `ExportService`.
    """
    workers: Optional[int] = None

    _image_service: ImageService = field(default_factory=ImageService)
    _process_service: ProcessService = field(default_factory=ProcessService)
    _export_service: ExportService = field(default_factory=ExportService)

    def convert(self, input_path: str | Path, output_path: str | Path) -> ImageDimensions:
        """Преобразует `input_path` в шаблон и сохраняет его в `output_path`.

        `output_path` может совпадать с `input_path` (режим in-place).
        Ошибки этапов (`ConversionError`) пробрасываются вызывающему без повторов.
        """
        source = Path(input_path)
        target = Path(output_path)

        logger.debug("Загрузка %s", source)
        buffer = self._image_service.load_image(source)

        logger.debug("Преобразование %dx%d", buffer.width, buffer.height)
        self._process_service.to_alpha_template(buffer, workers=self.workers)

        self._export_service.save(buffer, target)

        logger.info("%s -> %s (%dx%d)", source, target, buffer.width, buffer.height)
        return buffer.dimensions
