from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, NamedTuple, Optional, Tuple, Union

import click

from clip_io import Clipboard
from frag_split import Fragment, Unit, progress, render_prompt

HEADER_TEMPLATE = "以下に、ファイル: {name} を入力します。\n---\n"
FOOTER_TEMPLATE = "以上が、ファイル: {name} の内容である。\n"

FOOTER_PROMPT = "+footer prompt: Y(es)/P(rev)/Q(uit) [y]: "
HOLD_PROMPT = "P(rev)/Q(uit) [q]: "


@dataclass(frozen=True)
class FileInput:
    path: str
    display_name: str

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'FileInput':
        return cls(str(path), Path(path).name)

    def header(self) -> Optional[str]:
        return HEADER_TEMPLATE.format(name=self.display_name)

    def footer(self) -> Optional[str]:
        return FOOTER_TEMPLATE.format(name=self.display_name)


@dataclass(frozen=True)
class StdinInput:
    """Текст из stdin: передаётся без заголовка и без подвала."""

    def header(self) -> Optional[str]:
        return None

    def footer(self) -> Optional[str]:
        return None


InputSource = Union[FileInput, StdinInput]


class State(Enum):
    PRESENTING = 'presenting'
    FOOTER_PROMPT = 'footer_prompt'
    CLEARED = 'cleared'
    DONE = 'done'


TERMINAL_STATES = frozenset({State.CLEARED, State.DONE})


class Command(Enum):
    ADVANCE = 'advance'
    PREV = 'prev'
    QUIT = 'quit'


ALL_COMMANDS = frozenset(Command)

TOKENS = {
    'y': Command.ADVANCE,
    'yes': Command.ADVANCE,
    'p': Command.PREV,
    'prev': Command.PREV,
    'q': Command.QUIT,
    'quit': Command.QUIT,
}

CHOICES = {
    Command.ADVANCE: 'Y(es)',
    Command.PREV: 'P(rev)',
    Command.QUIT: 'Q(uit)',
}


class InvalidCommand(ValueError):
    """Нераспознанный ответ на запрос. Запрос просто показывается ещё раз."""
    pass


def parse_command(
    raw: str,
    default: Command = Command.ADVANCE,
    allowed: FrozenSet[Command] = ALL_COMMANDS,
) -> Command:
    token = raw.strip().lower()
    if not token:
        return default
    command = TOKENS.get(token)
    if command is None or command not in allowed:
        choices = '/'.join(CHOICES[c] for c in Command if c in allowed)
        raise InvalidCommand(f"無効な入力です。{choices} のいずれかを入力してください。")
    return command


@dataclass
class Session:
    """
    Курсор чтения по неизменяемой последовательности фрагментов.

    `cursor` - сколько фрагментов уже передано; в состоянии PRESENTING это
    ещё и индекс фрагмента, который передаст следующий ADVANCE.
    """
    fragments: Tuple[Fragment, ...]
    source: InputSource
    cursor: int = 0
    state: State = State.PRESENTING

    def __post_init__(self):
        # Передавать нечего.
        if not self.fragments:
            self.state = State.DONE

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def finalized(self) -> bool:
        return self.state is State.DONE


class Transition(NamedTuple):
    state: State
    cursor: int
    clipboard: Optional[str]  # None: буфер обмена не трогаем


def content_before(session: Session, index: int) -> Optional[str]:
    """
    Что лежало в буфере обмена непосредственно перед передачей fragments[index].

    None - до первого фрагмента stdin-ввода мы в буфер ничего не клали,
    поэтому его и не трогаем: очищает буфер только QUIT.
    """
    if index > 0:
        return session.fragments[index - 1].text
    return session.source.header()


def transition(session: Session, command: Command) -> Transition:
    """Следующее состояние, курсор и содержимое буфера для `command`. Сессию не меняет."""
    if session.finished:
        raise RuntimeError(f"Сессия уже завершена ({session.state.value}).")

    fragments = session.fragments
    i = session.cursor
    n = len(fragments)

    if command is Command.QUIT:
        return Transition(State.CLEARED, i, '')

    if session.state is State.FOOTER_PROMPT:
        if command is Command.ADVANCE:
            return Transition(State.DONE, n, session.source.footer())
        return Transition(State.PRESENTING, n - 1, fragments[n - 1].text)

    if command is Command.ADVANCE:
        if i + 1 < n:
            state = State.PRESENTING
        elif session.source.footer() is not None:
            state = State.FOOTER_PROMPT
        else:
            state = State.DONE
        return Transition(state, i + 1, fragments[i].text)

    # PREV: перед первым фрагментом ничего нет
    if i == 0:
        return Transition(State.PRESENTING, 0, None)
    return Transition(State.PRESENTING, i - 1, content_before(session, i - 1))


def _echo_err(message: str, nl: bool = True) -> None:
    click.echo(message, nl=nl, err=True)


class SessionController:
    """
    Ведёт сессию по ответам пользователя.

    `read_line` возвращает одну строку ввода или "" в конце ввода (это
    считается QUIT). Запросы и сообщения идут через `echo`, по умолчанию в
    stderr.
    """

    def __init__(
        self,
        session: Session,
        unit: Unit,
        clipboard: Clipboard,
        read_line: Callable[[], str],
        echo: Callable[..., None] = _echo_err,
    ):
        self.session = session
        self.unit = unit
        self.clipboard = clipboard
        self.read_line = read_line
        self.echo = echo
        self.current: Optional[str] = None

    def _set(self, text: str) -> None:
        self.clipboard.set(text)
        self.current = text

    def start(self) -> None:
        if self.session.finished:
            return
        header = self.session.source.header()
        if header is not None:
            self._set(header)

    def prompt_text(self) -> str:
        if self.session.state is State.FOOTER_PROMPT:
            return FOOTER_PROMPT
        p = progress(self.session.fragments, self.session.cursor, self.unit)
        return render_prompt(p, self.unit)

    def ask(self, prompt: str, default: Command, allowed: FrozenSet[Command] = ALL_COMMANDS) -> Command:
        self.echo(prompt, nl=False)
        line = self.read_line()
        if line == '':
            self.echo('')
            return Command.QUIT
        return parse_command(line, default, allowed)

    def step(self, command: Command) -> State:
        t = transition(self.session, command)
        if t.clipboard is not None:
            self._set(t.clipboard)
        self.session.state = t.state
        self.session.cursor = t.cursor
        return t.state

    def run(self) -> State:
        """Выложить заголовок и спрашивать до конца сессии. Возвращает конечное состояние."""
        self.start()
        while not self.session.finished:
            try:
                command = self.ask(self.prompt_text(), Command.ADVANCE)
            except InvalidCommand as e:
                self.echo(str(e))
                continue
            self.step(command)
        return self.session.state

    def hold(self) -> State:
        """
        После обычного завершения держит последнее содержимое: P(rev) кладёт его
        в буфер ещё раз, Q(uit) (по умолчанию) очищает буфер.
        """
        if self.session.state is not State.DONE or self.current is None:
            return self.session.state
        allowed = frozenset({Command.PREV, Command.QUIT})
        while True:
            try:
                command = self.ask(HOLD_PROMPT, Command.QUIT, allowed)
            except InvalidCommand as e:
                self.echo(str(e))
                continue
            if command is Command.PREV:
                self._set(self.current)
                continue
            self._set('')
            self.session.state = State.CLEARED
            return self.session.state
