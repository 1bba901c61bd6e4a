import os
from pathlib import Path
from typing import IO, Optional, Protocol, Union

import click
import pyperclip


class ClipboardError(Exception):
    """Исключение, выбрасываемое, если не удаётся записать в буфер обмена."""
    pass


class InputIOError(Exception):
    """Исключение, выбрасываемое, если не удаётся прочитать файл или stdin."""
    pass


class Clipboard(Protocol):
    def set(self, text: str) -> None:
        """Заменить содержимое буфера обмена на text."""
        ...


class PyperclipClipboard:
    """Системный буфер обмена через pyperclip."""

    def set(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Не удалось скопировать в буфер обмена: {e}") from e


def read_all(path: Optional[Union[str, Path]] = None) -> bytes:
    """Прочитать вход целиком: файл `path` или двоичный stdin, если path = None."""
    try:
        if path is None:
            return click.get_binary_stream('stdin').read()
        return Path(path).read_bytes()
    except OSError as e:
        source = path if path is not None else '<stdin>'
        raise InputIOError(f"Не удалось прочитать {source}: {e}") from e


def open_tty() -> IO[str]:
    """Открыть терминал для чтения команд, когда сам текст идёт через stdin."""
    name = 'CON' if os.name == 'nt' else '/dev/tty'
    try:
        return open(name, 'r', encoding='utf-8')
    except OSError as e:
        raise InputIOError(f"Не удалось открыть терминал {name} для ввода команд: {e}") from e
