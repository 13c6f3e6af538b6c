"""
ClickPrompter — the interactive Prompter used by the CLI.
"""

from __future__ import annotations

import click

from wrfbuild.core.services.build.domain.prompter import Prompter


class ClickPrompter(Prompter):
    """Ask questions on the terminal through click."""

    def confirm(self, question: str, default: bool = True) -> bool:
        return click.confirm(question, default=default)

    def ask(self, question: str, default: str = "") -> str:
        return click.prompt(question, default=default, show_default=bool(default))

    def show(self, text: str) -> None:
        click.echo(text)

    def pause(self, message: str = "Press Enter to continue...") -> None:
        click.prompt(message, default="", show_default=False, prompt_suffix="")
