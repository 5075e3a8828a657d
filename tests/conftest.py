"""
Общие фикстуры: запись небольших тестовых изображений во временный каталог.
"""

from pathlib import Path
from typing import Callable, List, Sequence

import numpy as np
import pytest
from PIL import Image


def _to_array(rows: Sequence[Sequence[Sequence[int]]]) -> np.ndarray:
    return np.array(rows, dtype=np.uint8)


@pytest.fixture
def write_image(tmp_path) -> Callable[..., Path]:
    """Фабрика: сохраняет пиксели (строки кортежей RGB или RGBA) в файл и возвращает путь."""

    def _write(rows, name: str = "input.png") -> Path:
        arr = _to_array(rows)
        mode = "RGBA" if arr.shape[2] == 4 else "RGB"
        path = tmp_path / name
        Image.frombytes(mode, (arr.shape[1], arr.shape[0]), arr.tobytes()).save(path)
        return path

    return _write


@pytest.fixture
def random_rgba() -> np.ndarray:
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8)


@pytest.fixture
def random_png(tmp_path, random_rgba) -> Path:
    path = tmp_path / "random.png"
    Image.frombytes("RGBA", (random_rgba.shape[1], random_rgba.shape[0]), random_rgba.tobytes()).save(path)
    return path


def read_rgba(path: Path) -> np.ndarray:
    with Image.open(path) as image:
        return np.asarray(image.convert("RGBA")).copy()


@pytest.fixture
def read_image() -> Callable[[Path], np.ndarray]:
    return read_rgba
