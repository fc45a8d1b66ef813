"""
Wallet Prompts - Typed user requests and the adapters that answer them.

The wallet never reads from the terminal itself. It describes what it
needs as a request object and hands it to a Prompter:

    SelectRequest  -> one value out of a fixed set of choices
    TextRequest    -> free text, optionally with a default
    SecretRequest  -> hidden text (passwords), optionally confirmed

TerminalPrompter answers them with input()/getpass(); tests answer them
from a script.
"""

import getpass
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Choice:
    """One option of a SelectRequest."""
    label: str    # Shown to the user
    value: str    # Returned to the caller


@dataclass(frozen=True)
class SelectRequest:
    message: str
    choices: tuple[Choice, ...]
    numbered: bool = True   # Menu positions; False when labels carry their own key

    def values(self) -> list[str]:
        return [c.value for c in self.choices]


@dataclass(frozen=True)
class TextRequest:
    message: str
    default: Optional[str] = None


@dataclass(frozen=True)
class SecretRequest:
    message: str
    confirm: bool = False   # Ask twice (new passwords)


Request = SelectRequest | TextRequest | SecretRequest


class Prompter:
    """Fulfils prompt requests. Subclasses decide how they are rendered."""

    def ask(self, request: Request) -> str:
        raise NotImplementedError

    def notify(self, message: str) -> None:
        """Show a non-fatal message (validation failures, status)."""
        raise NotImplementedError


class TerminalPrompter(Prompter):
    """
    Prompter backed by the controlling terminal.

    Select requests are rendered as a numbered menu unless they opt out.
    Passwords are read with getpass so they never echo. Ctrl-C and EOF
    propagate unchanged, so an aborted prompt never reaches a keystore write.
    """

    def __init__(self, input_func=input, getpass_func=getpass.getpass, output=print):
        self._input = input_func
        self._getpass = getpass_func
        self._print = output

    def ask(self, request: Request) -> str:
        if isinstance(request, SelectRequest):
            return self._select(request)
        if isinstance(request, TextRequest):
            return self._text(request)
        if isinstance(request, SecretRequest):
            return self._secret(request)
        raise TypeError(f"Unsupported prompt request: {type(request).__name__}")

    def notify(self, message: str) -> None:
        self._print(message)

    def _select(self, request: SelectRequest) -> str:
        if not request.choices:
            raise ValueError("Select request has no choices")

        self._print(request.message)
        if not request.numbered:
            return self._select_by_value(request)
        for number, choice in enumerate(request.choices, start=1):
            self._print(f"  {number}) {choice.label}")

        while True:
            answer = self._input("> ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(request.choices):
                return request.choices[int(answer) - 1].value
            # Accept the raw value too (e.g. "p" for plaintext)
            if answer in request.values():
                return answer
            self._print(f"Please enter a number between 1 and {len(request.choices)}")

    def _select_by_value(self, request: SelectRequest) -> str:
        for choice in request.choices:
            self._print(f"  {choice.label}")

        while True:
            answer = self._input("> ").strip()
            if answer in request.values():
                return answer
            self._print(f"Please enter one of: {', '.join(request.values())}")

    def _text(self, request: TextRequest) -> str:
        suffix = f" [{request.default}]" if request.default is not None else ""
        answer = self._input(f"{request.message}{suffix} ").strip()
        if not answer and request.default is not None:
            return request.default
        return answer

    def _secret(self, request: SecretRequest) -> str:
        while True:
            password = self._getpass(f"{request.message} ")
            if not password:
                self._print("Please enter a password")
                continue
            if request.confirm:
                confirm = self._getpass("Confirm password: ")
                if password != confirm:
                    self._print("Passwords do not match")
                    continue
            return password
