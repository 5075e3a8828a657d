"""Командная строка: разбор аргументов и выбор пути вывода."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from image_to_alpha.controllers.convert_controller import ConvertController
from image_to_alpha.errors import ConversionError

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Преобразует PNG в шаблон: инвертированная яркость помещается в альфа-канал, "
    "а само изображение становится чёрным."
)
EPILOG = (
    "Для каждого пикселя вычисляется яркость, затем RGB заменяется на чёрный, "
    "а в альфа-канал записывается инвертированная яркость. Результат подходит "
    "для масок и подсветки (template image)."
)


class ValidationError(Exception):
    """Недопустимое сочетание аргументов."""


def resolve_output_path(input_path: str, output_path: Optional[str], in_place: bool) -> str:
    if in_place:
        if output_path is not None:
            raise ValidationError("При использовании -i/--in-place укажите только один путь.")
        return input_path
    if output_path is None:
        raise ValidationError("Укажите путь вывода, если не используется -i/--in-place.")
    return output_path


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"ожидалось целое число: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"ожидалось положительное число: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="image-to-alpha", description=DESCRIPTION, epilog=EPILOG)
    parser.add_argument(
        "-i", "--in-place", action="store_true",
        help="Обработать файл на месте; один и тот же путь для ввода и вывода.",
    )
    parser.add_argument("input_path", help="Путь к исходному изображению.")
    parser.add_argument("output_path", nargs="?", default=None, help="Путь к результату.")
    parser.add_argument(
        "-j", "--workers", type=_positive_int, default=None,
        help="Число потоков обработки (по умолчанию — по числу CPU).",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Подробный вывод (-vv — отладка).",
    )
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def run(argv: Optional[List[str]] = None) -> int:
    """Разбирает аргументы и запускает преобразование.

    Returns:
        0 при успехе, 1 при ошибке преобразования. Ошибки валидации аргументов
        завершают процесс через `parser.error` (код 2) до запуска конвейера.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        output_path = resolve_output_path(args.input_path, args.output_path, args.in_place)
    except ValidationError as exc:
        parser.error(str(exc))

    controller = ConvertController(workers=args.workers)
    try:
        controller.convert(Path(args.input_path), Path(output_path))
    except ConversionError as exc:
        logger.error("%s", exc)
        return 1
    return 0
