from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

DEFAULT_CHAR_LIMIT = 10240


class Unit(Enum):
    CHARS = 'chars'
    BYTES = 'bytes'


def measure_chars(text: str) -> int:
    return len(text)


def measure_bytes(text: str) -> int:
    return len(text.encode('utf-8'))


MEASURES = {
    Unit.CHARS: measure_chars,
    Unit.BYTES: measure_bytes,
}


@dataclass(frozen=True)
class Budget:
    """Максимальный размер одного фрагмента: в символах или в байтах UTF-8."""
    unit: Unit
    limit: int

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError(f"Лимит фрагмента должен быть положительным, получено {self.limit}.")

    @classmethod
    def chars(cls, limit: int = DEFAULT_CHAR_LIMIT) -> 'Budget':
        return cls(Unit.CHARS, limit)

    @classmethod
    def bytes(cls, limit: int) -> 'Budget':
        return cls(Unit.BYTES, limit)

    def measure(self, text: str) -> int:
        return MEASURES[self.unit](text)


@dataclass(frozen=True)
class Fragment:
    ordinal: int
    text: str
    size_chars: int
    size_bytes: int

    @classmethod
    def of(cls, ordinal: int, text: str) -> 'Fragment':
        return cls(ordinal, text, measure_chars(text), measure_bytes(text))

    def size(self, unit: Unit) -> int:
        return self.size_chars if unit is Unit.CHARS else self.size_bytes


def split_lines(text: str) -> List[str]:
    """
    Разбить текст на строки, оставляя "\\n" в конце своей строки.

    Строку заканчивает только "\\n": "\\r\\n" не рвётся, одиночный "\\r"
    строку не делит (в отличие от str.splitlines()).
    """
    lines = []
    start = 0
    while True:
        end = text.find('\n', start)
        if end == -1:
            break
        lines.append(text[start:end + 1])
        start = end + 1
    if start < len(text):
        lines.append(text[start:])
    return lines


def split_fragments(
    text: str,
    budget: Budget,
    measure_fn: Optional[Callable[[str], int]] = None,
) -> Tuple[Fragment, ...]:
    """
    Жадно упаковать целые строки во фрагменты размером не более budget.limit.

    Фрагмент закрывается, как только следующая строка вывела бы его за лимит.
    Строка, которая сама по себе больше лимита, никогда не режется: она
    становится отдельным фрагментом, и только такой фрагмент может превышать
    бюджет.

    Склейка текстов фрагментов по порядку даёт ровно исходный `text`.
    """
    measure = measure_fn or budget.measure

    fragments: List[Fragment] = []
    current = ''
    current_size = 0

    def close():
        nonlocal current, current_size
        if current:
            fragments.append(Fragment.of(len(fragments), current))
        current = ''
        current_size = 0

    for line in split_lines(text):
        # measure_fn не обязан быть аддитивным: меряем склеенный текст целиком
        candidate = current + line
        candidate_size = measure(candidate)
        if current and candidate_size > budget.limit:
            close()
            candidate = line
            candidate_size = measure(line)
        current = candidate
        current_size = candidate_size
        # Строка длиннее лимита: к ней больше ничего не добавляем.
        if current_size > budget.limit:
            close()

    close()
    return tuple(fragments)


class Progress(NamedTuple):
    size: int
    percent: float
    cumulative: int
    total: int
    cumulative_percent: float


def progress(fragments: Sequence[Fragment], index: int, unit: Unit) -> Progress:
    """Показатели для фрагмента `index`: его доля и доля, переданная вместе с ним."""
    total = sum(f.size(unit) for f in fragments)
    size = fragments[index].size(unit)
    cumulative = sum(f.size(unit) for f in fragments[:index + 1])
    if total == 0:
        return Progress(size, 0.0, cumulative, total, 0.0)
    return Progress(size, size * 100.0/total, cumulative, total, cumulative * 100.0/total)


def format_with_underscore(n: int) -> str:
    """1234567 -> '1_234_567'"""
    return f"{n:_d}"


def render_prompt(p: Progress, unit: Unit) -> str:
    return (
        f"+{format_with_underscore(p.size)} [{unit.value}] ({p.percent:.1f}%), "
        f"{format_with_underscore(p.cumulative)}/{format_with_underscore(p.total)} "
        f"({p.cumulative_percent:.1f}%): Y(es)/P(rev)/Q(uit) [y]: "
    )
