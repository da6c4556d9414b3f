"""Interactive questions asked during install."""

from __future__ import annotations

import re
import sys
from typing import Callable, Protocol, TextIO

_YES = re.compile(r"^\s*y", re.IGNORECASE)


class Prompter(Protocol):
    def confirm(self, source: str, contents: str) -> bool:
        ...

    def ask_alias(self, source: str) -> str:
        ...


class ConsolePrompter:
    """Line-based prompts on the terminal."""

    def __init__(
        self,
        *,
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_func
        self._output = output

    def confirm(self, source: str, contents: str) -> bool:
        out = self._output or sys.stdout
        print("Your task file contains:", file=out)
        print(contents, file=out)
        return bool(_YES.match(self._read("Do you wish to continue [y/N]? ")))

    def ask_alias(self, source: str) -> str:
        answer = self._read(f"Please specify a name for {source} in the system repository [{source}]: ")
        return answer.strip() or source

    def _read(self, question: str) -> str:
        try:
            return self._input(question)
        except EOFError:
            return ""


class StaticPrompter:
    """Answers every question without asking, for ``--yes`` and scripted use."""

    def __init__(self, *, accept: bool = True) -> None:
        self._accept = accept

    def confirm(self, source: str, contents: str) -> bool:
        return self._accept

    def ask_alias(self, source: str) -> str:
        return source


__all__ = ["ConsolePrompter", "Prompter", "StaticPrompter"]
