"""
interactive.py

Responsibility: ask the user yes/no questions and free-text values.

`Prompter` is the capability the initializer depends on; `ConsolePrompter`
reads from stdin. When stdin is not a terminal every confirmation is declined,
so unattended runs never block on input.
"""

from __future__ import annotations

import sys
from typing import Protocol


class Prompter(Protocol):
    def confirm(self, question: str) -> bool: ...

    def ask(self, question: str) -> str: ...


class ConsolePrompter:
    """Reads answers from stdin. A non-interactive stdin declines every question."""

    def confirm(self, question: str) -> bool:
        if not sys.stdin.isatty():
            return False
        answer = input(f"{question} [y/N] ").strip().lower()
        return answer in ("y", "yes")

    def ask(self, question: str) -> str:
        if not sys.stdin.isatty():
            return ""
        return input(f"{question} ").strip()
