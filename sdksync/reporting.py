"""Console reporting and GitHub Actions annotations."""

import os

from rich.console import Console


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class Reporter:
    """Reports progress the way ``@actions/core`` does.

    Inside a GitHub Actions runner messages are written as workflow commands
    so they show up as annotations. Elsewhere they are printed with rich
    styling, and debug lines only appear when ``verbose`` is set.
    """

    def __init__(
        self,
        console: Console | None = None,
        verbose: bool = False,
        github_actions: bool | None = None,
    ):
        self.console = console or Console(highlight=False)
        self.verbose = verbose
        if github_actions is None:
            github_actions = os.environ.get("GITHUB_ACTIONS") == "true"
        self.github_actions = github_actions
        self.failed = False
        self.failure_message: str | None = None

    def _command(self, name: str, message: str) -> None:
        self.console.print(f"::{name}::{_escape_data(message)}", markup=False, soft_wrap=True)

    def debug(self, message: str) -> None:
        if self.github_actions:
            self._command("debug", message)
        elif self.verbose:
            self.console.print(message, style="dim", markup=False, soft_wrap=True)

    def info(self, message: str) -> None:
        self.console.print(message, markup=False, soft_wrap=True)

    def warning(self, message: str) -> None:
        if self.github_actions:
            self._command("warning", message)
        else:
            self.console.print(f"Warning: {message}", style="yellow", markup=False, soft_wrap=True)

    def error(self, message: str) -> None:
        if self.github_actions:
            self._command("error", message)
        else:
            self.console.print(f"Error: {message}", style="red", markup=False, soft_wrap=True)

    def set_failed(self, message: str) -> None:
        """Report a blocking failure; the run will exit with status 1."""
        self.failed = True
        self.failure_message = message
        self.error(message)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
