"""Command-line interface: tokenizer, prompt loop and the click entry point.

Each line is split into a command word and one free-text remainder, handed
to the Dispatcher, and whatever lines come back are printed. Saving happens
inside the Dispatcher after every successful change, never here.
"""
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import click

from config import load_settings
from dispatcher import Dispatcher
from logging_setup import setup_logging
from registry import Registry
from storage import Storage

logger = logging.getLogger(__name__)


def tokenize(line: str) -> List[str]:
    """Split a raw line into [command, remainder]; blank line -> []."""
    words = line.strip().split()
    if not words:
        return []
    if len(words) == 1:
        return [words[0]]
    return [words[0], ' '.join(words[1:])]


def build_dispatcher(tasks_file: Path, styled: bool = False) -> Dispatcher:
    storage = Storage(tasks_file)
    records, next_id = storage.load()
    registry = Registry.from_records(records, next_id)
    logger.debug("Loaded %s from %s", registry, storage.path)
    return Dispatcher(registry, storage, styled=styled)


class CLI:
    def __init__(self, dispatcher: Dispatcher, prompt: str = '(todo) > '):
        self.dispatcher: Dispatcher = dispatcher
        self.prompt: str = prompt

    def run(self) -> None:
        """Main REPL loop; stops on 'exit', end of input or Ctrl-C."""
        try:
            while True:
                try:
                    line = input(self.prompt)
                except UnicodeDecodeError:
                    click.echo("Input is not valid text; line ignored.")
                    continue
                tokens = tokenize(line)
                if not tokens:
                    continue
                result = self.dispatcher.dispatch(tokens)
                for out in result.lines:
                    click.echo(out)
                if result.exit:
                    click.echo("Goodbye.")
                    break
        except (KeyboardInterrupt, EOFError):
            click.echo("\nGoodbye.")


@click.command(context_settings={'ignore_unknown_options': True, 'allow_interspersed_args': False,
                                 'help_option_names': ['-h', '--help']})
@click.option('-f', '--file', 'tasks_file', type=click.Path(dir_okay=False, path_type=Path),
              default=None, help='Path to the tasks file (default: $TODO_FILE or ~/.todo.json).')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Console log level (default: $TODO_LOG_LEVEL or WARNING).')
@click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Also write debug logs to this file.')
@click.argument('words', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(ctx: click.Context, tasks_file: Optional[Path], log_level: Optional[str],
         log_file: Optional[Path], words: Sequence[str]) -> None:
    """Terminal todo list.

    With no WORDS an interactive prompt starts. Otherwise WORDS are run as a
    single command, e.g. `todo add buy milk` or `todo done 3`. Options must
    come before WORDS; everything after the command word is passed through.
    """
    settings = load_settings()
    setup_logging(console_level=log_level or settings.log_level, log_file=log_file or settings.log_file)
    interactive = not words
    dispatcher = build_dispatcher(tasks_file or settings.tasks_file, styled=interactive)
    if interactive:
        CLI(dispatcher, settings.prompt).run()
        return
    result = dispatcher.dispatch(tokenize(' '.join(words)))
    for out in result.lines:
        click.echo(out)
    if not result.ok:
        ctx.exit(1)


if __name__ == '__main__':  # pragma: no cover
    main()
