from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

# Windows-вариант Shift_JIS: именно в нём на деле лежат "Shift_JIS"-файлы.
LEGACY_CODEC = 'cp932'

# Одиночные байты 0xA0 и 0xFD-0xFF cp932 в Python превращает в U+F8F0-U+F8F3,
# а в Shift_JIS это ошибки.
LEGACY_UNMAPPED = frozenset('\uf8f0\uf8f1\uf8f2\uf8f3')


class EncodingError(Exception):
    """Исключение, выбрасываемое, если вход не является ни UTF-8, ни Shift_JIS."""
    pass


class EncodingLabel(Enum):
    UTF8 = 'UTF-8'
    LEGACY_DBCS = 'Shift_JIS'


@dataclass(frozen=True)
class Decoded:
    text: str
    label: EncodingLabel


@dataclass(frozen=True)
class Undecodable:
    reason: str


def _undecodable(position: int, data: bytes) -> Undecodable:
    return Undecodable(
        f"Вход не является ни UTF-8, ни Shift_JIS (байт {position}: {data!r})."
    )


def _decode_legacy(data: bytes) -> Union[Decoded, Undecodable]:
    try:
        text = data.decode(LEGACY_CODEC)
    except UnicodeDecodeError as e:
        return _undecodable(e.start, data[e.start:e.end])

    for index, ch in enumerate(text):
        if ch in LEGACY_UNMAPPED:
            # Позиция в байтах: перекодируем префикс обратно
            position = len(text[:index].encode(LEGACY_CODEC))
            return _undecodable(position, data[position:position + 1])
    return Decoded(text, EncodingLabel.LEGACY_DBCS)


def classify(data: bytes) -> Union[Decoded, Undecodable]:
    """
    Определить, в какой из двух поддерживаемых кодировок записаны байты.

    Сначала строго проверяется UTF-8 (весь поток целиком), и только потом
    устаревшая двухбайтовая кодировка. По BOM и локали ничего не угадываем.
    """
    try:
        return Decoded(data.decode('utf-8'), EncodingLabel.UTF8)
    except UnicodeDecodeError:
        pass
    return _decode_legacy(data)


def detect_and_decode(data: bytes) -> Tuple[str, EncodingLabel]:
    """Декодировать вход; если ни одна кодировка не подходит - EncodingError."""
    result = classify(data)
    if isinstance(result, Undecodable):
        raise EncodingError(result.reason)
    return result.text, result.label
