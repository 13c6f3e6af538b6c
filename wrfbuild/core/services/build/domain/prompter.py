"""
L1 Domain — The prompter contract.

Stages that need a decision from the user ask through a Prompter.
The CLI supplies a click-backed implementation; tests supply scripted
answers. Prompters never raise on bad input: validation loops live in
``choose_number``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Prompter(ABC):
    """Abstract source of user answers."""

    @abstractmethod
    def confirm(self, question: str, default: bool = True) -> bool:
        """Yes/no question."""

    @abstractmethod
    def ask(self, question: str, default: str = "") -> str:
        """Free-form answer; empty input returns ``default``."""

    @abstractmethod
    def show(self, text: str) -> None:
        """Print a block of text (banners, log contents) verbatim."""

    @abstractmethod
    def pause(self, message: str = "Press Enter to continue...") -> None:
        """Wait for the user to acknowledge."""


def choose_number(
    prompter: Prompter,
    question: str,
    default: str,
    valid: set[str] | None = None,
) -> str:
    """Ask until the answer is a number (and in ``valid`` when given).

    Returns the selection as a string, as the external configure
    scripts expect it.
    """
    while True:
        answer = prompter.ask(question, default=default).strip() or default
        if answer.isdigit() and (valid is None or answer in valid):
            return answer
        if valid:
            options = ", ".join(sorted(valid, key=int))
            logger.error("Invalid option. Please enter one of: %s.", options)
        else:
            logger.error("Invalid option. Please enter a number.")
