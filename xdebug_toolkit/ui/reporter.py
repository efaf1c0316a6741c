"""terminal output for the xdebug toolkit, built on rich"""

import os
from pathlib import Path
from typing import Any, Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from ..core import config


custom_theme = Theme({
    "info": "green",
    "hint": "yellow",
    "warning": "yellow",
    "error": "bold red",
    "enabled": "bold green",
    "disabled": "bold red",
    "filename": "white",
})


class Reporter:
    """human readable status, messages and task progress"""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        """initialize reporter

        Args:
            console: console for regular output (stdout by default)
            err_console: console for errors; falls back to `console` when only that is given
        """
        self.console = console or Console()
        if err_console is None:
            err_console = console if console is not None else Console(stderr=True)
        self.err_console = err_console
        self.console.push_theme(custom_theme)
        if self.err_console is not self.console:
            self.err_console.push_theme(custom_theme)

    def status(self, enabled: bool, ini_path: Path):
        """print the directive state and the base filename of the ini"""
        state = "enabled" if enabled else "disabled"
        self.console.print(
            f"{config.EXTENSION_DISPLAY_NAME} is [{state}]{state}[/{state}] "
            f"[filename]({escape(os.path.basename(str(ini_path)))})[/filename]"
        )

    def generated(self, variant: str, ini_path: Path):
        """announce a freshly generated variant ini"""
        label = "CLI" if variant == config.VARIANT_CLI else variant
        self.info(f"Generated new {label} ini file at {ini_path}")

    def info(self, message: str):
        self.console.print(escape(message), style="info")

    def hint(self, message: str):
        """remediation advice; goes with the error it belongs to"""
        self.err_console.print(escape(message), style="hint")

    def warning(self, message: str):
        self.err_console.print(escape(message), style="warning")

    def error(self, message: str):
        self.err_console.print(escape(message), style="error")

    def task(self, title: str, func: Callable[[], Any], loading_text: str = "loading...") -> Any:
        """run func behind a spinner and print a check mark or a cross

        func's return value is passed through; a falsy value counts as failure.
        """
        with self.console.status(f"{escape(title)}: {escape(loading_text)}"):
            result = func()
        mark = "[info]✔[/info]" if result else "[error]✘[/error]"
        self.console.print(f"{escape(title)}: {mark}")
        return result
