"""Prompt widgets: masked input, single-choice lists and error messages."""
import getpass
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TextIO

Validator = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class QuickPickItem:
    """One entry of a single-choice list."""
    label: str
    value: object
    detail: Optional[str] = None


class Prompter(ABC):
    """
    User interaction used by the SAS URI command.

    Every method returns None when the user dismisses the prompt.
    """

    @abstractmethod
    def show_input_box(
        self,
        prompt: str,
        password: bool = False,
        validate_input: Optional[Validator] = None,
    ) -> Optional[str]:
        """Ask for text; re-asks until validate_input returns None."""

    @abstractmethod
    def show_quick_pick(
        self,
        items: Sequence[QuickPickItem],
        placeholder: Optional[str] = None,
    ) -> Optional[QuickPickItem]:
        """Ask the user to choose one item."""

    @abstractmethod
    def show_error_message(self, message: str, *actions: str) -> Optional[str]:
        """Report an error; returns the chosen action, if any."""


class ConsolePrompter(Prompter):
    """Terminal prompts. Questions go to stderr so stdout stays clean for output."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        input_func: Callable[[], str] = input,
        getpass_func: Callable[..., str] = getpass.getpass,
    ):
        self.stream = stream or sys.stderr
        self._input = input_func
        self._getpass = getpass_func

    def _write(self, text: str) -> None:
        print(text, file=self.stream)

    def _read(self, prompt: str, password: bool) -> Optional[str]:
        try:
            if password:
                return self._getpass(prompt, stream=self.stream)
            self.stream.write(prompt)
            self.stream.flush()
            return self._input()
        except (EOFError, KeyboardInterrupt):
            self._write("")
            return None

    def show_input_box(self, prompt, password=False, validate_input=None):
        while True:
            answer = self._read(f"{prompt}: ", password)
            if answer is None:
                return None

            answer = answer.strip()
            if not answer:
                return None

            error = validate_input(answer) if validate_input else None
            if error is None:
                return answer

            self._write(f"Error: {error}")

    def show_quick_pick(self, items, placeholder=None):
        if not items:
            return None

        if placeholder:
            self._write(placeholder)
        for index, item in enumerate(items, start=1):
            line = f"  {index}. {item.label}"
            if item.detail:
                line += f" ({item.detail})"
            self._write(line)

        while True:
            answer = self._read(f"Enter choice (1-{len(items)}): ", password=False)
            if answer is None or not answer.strip():
                return None

            try:
                choice = int(answer.strip())
            except ValueError:
                choice = 0

            if 1 <= choice <= len(items):
                return items[choice - 1]

            self._write("Invalid choice.")

    def show_error_message(self, message, *actions):
        self._write(f"Error: {message}")
        if not actions:
            return None

        for action in actions:
            answer = self._read(f"{action}? (y/N): ", password=False)
            if answer and answer.strip().lower() == 'y':
                return action
        return None
