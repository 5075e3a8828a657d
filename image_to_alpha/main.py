"""Точка входа в приложение."""
import sys

from image_to_alpha.cli import run


def main() -> None:
    """Разбирает аргументы командной строки и запускает преобразование."""
    sys.exit(run())


if __name__ == "__main__":
    main()
