"""Terminal output and prompts for the flashcard commands, built on rich"""
import logging
from typing import Callable, List, Optional, Sequence, Tuple

import click
from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

logger = logging.getLogger(__name__)

Validator = Callable[[str], Optional[str]]


class ConsoleRenderer:
    """
    Everything the interactive commands print or ask goes through here, so
    tests can swap in a scripted renderer.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    def info(self, message: str) -> None:
        self.console.print(message, style='green')

    def success(self, message: str) -> None:
        self.console.print(message, style='bold green')

    def warning(self, message: str) -> None:
        self.console.print(message, style='yellow')

    def error(self, message: str) -> None:
        self.console.print(message, style='bold red')

    def note(self, message: str) -> None:
        self.console.print(message, style='dim')

    def table(self, headers: Sequence[str], rows: Sequence[Sequence], title: Optional[str] = None) -> None:
        table = Table(title=title)
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*[str(value) for value in row])
        self.console.print(table)

    def ask(self, label: str, default: Optional[str] = None,
            validate: Optional[Validator] = None) -> str:
        """
        Ask for a line of text, asking again until ``validate`` accepts it.

        Args:
            label: Prompt shown to the user
            default: Value used when the user just presses Enter
            validate: Returns an error message for bad input, None for good input
        """
        while True:
            if default is None:
                value = Prompt.ask(label, console=self.console)
            else:
                value = Prompt.ask(label, console=self.console, default=default)
            value = (value or '').strip()

            message = validate(value) if validate else None
            if message is None:
                return value

            self.error(message)
            logger.debug(f'Rejected input for prompt {label!r}: {message}')

    def ask_secret(self, label: str, validate: Optional[Validator] = None) -> str:
        while True:
            value = click.prompt(label, hide_input=True, default='', show_default=False)

            message = validate(value) if validate else None
            if message is None:
                return value

            self.error(message)

    def confirm(self, label: str, default: bool = False) -> bool:
        return Confirm.ask(label, console=self.console, default=default)

    def select(self, label: str, options: List[Tuple[str, str]], default: Optional[str] = None) -> str:
        """
        Show a numbered list of options and return the chosen option's key.

        Args:
            label: Question shown above the list
            options: (key, text) pairs in display order
            default: Key picked when the user just presses Enter
        """
        self.console.print(label, style='bold')
        for number, (_, text) in enumerate(options, start=1):
            self.console.print(f'  {number}. {text}')

        keys = [key for key, _ in options]
        default_number = keys.index(default) + 1 if default in keys else None

        while True:
            if default_number is None:
                number = IntPrompt.ask('Choose an option', console=self.console)
            else:
                number = IntPrompt.ask('Choose an option', console=self.console, default=default_number)

            if 1 <= number <= len(options):
                return keys[number - 1]

            self.error(f'Please enter a number between 1 and {len(options)}.')
