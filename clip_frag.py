from contextlib import nullcontext

import click

from clip_io import ClipboardError, InputIOError, PyperclipClipboard, open_tty, read_all
from clip_session import FileInput, Session, SessionController, StdinInput
from frag_split import DEFAULT_CHAR_LIMIT, Budget, split_fragments
from text_encoding import EncodingError, detect_and_decode


@click.command()
@click.option('-c', '--chars', 'char_limit', type=click.IntRange(min=1), default=None,
              help=f'Максимальный размер фрагмента в символах (по умолчанию {DEFAULT_CHAR_LIMIT})')
@click.option('-b', '--bytes', 'byte_limit', type=click.IntRange(min=1), default=None,
              help='Максимальный размер фрагмента в байтах UTF-8')
@click.option('--hold', is_flag=True, default=False,
              help='После последнего фрагмента ждать P(rev)/Q(uit) перед очисткой буфера')
@click.argument('input_file', required=False, type=click.Path(exists=True, dir_okay=False))
def main(char_limit, byte_limit, hold, input_file):
    """
    Копирует текст в буфер обмена по фрагментам, не разрывая строки.

    Без INPUT_FILE текст читается из stdin, а ответы - из терминала.
    """
    if char_limit is not None and byte_limit is not None:
        raise click.UsageError('-c и -b нельзя указывать одновременно')
    if byte_limit is not None:
        budget = Budget.bytes(byte_limit)
    else:
        budget = Budget.chars(char_limit if char_limit is not None else DEFAULT_CHAR_LIMIT)

    try:
        text, label = detect_and_decode(read_all(input_file))
        click.echo(f"encoding: {label.value}", err=True)

        fragments = split_fragments(text, budget)
        if not fragments:
            click.echo("Вход пуст, передавать нечего.", err=True)
            return

        if input_file is not None:
            source = FileInput.from_path(input_file)
            commands = nullcontext(click.get_text_stream('stdin'))
        else:
            # stdin занят текстом, поэтому ответы читаем из терминала
            source = StdinInput()
            commands = open_tty()

        with commands as stream:
            controller = SessionController(
                Session(fragments, source), budget.unit, PyperclipClipboard(), stream.readline,
            )
            controller.run()
            if hold:
                controller.hold()
    except (EncodingError, InputIOError, ClipboardError) as e:
        click.echo(f"ERROR: {e}", err=True)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
