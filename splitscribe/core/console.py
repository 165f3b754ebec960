import logging
import traceback
from typing import Optional, ContextManager
from contextlib import contextmanager

from rich.console import Console
from rich.traceback import install as install_rich_traceback
from rich.markup import escape
from rich.theme import Theme

from ..constants import LOGGER_NAME

# Records stay quiet until setup_logging() installs real handlers
logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

# Custom theme
splitscribe_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

class ConsoleManager:
    """
    Shared console output.

    Progress and results go to stdout, diagnostics go to stderr with an
    ``Error:`` prefix. File names and transcript text are printed without
    rich markup so brackets in user content are never interpreted.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConsoleManager, cls).__new__(cls)
            cls._instance.initialized = False
        return cls._instance

    def __init__(self):
        if self.initialized:
            return

        self.console = Console(theme=splitscribe_theme, soft_wrap=True, highlight=False)
        self.err_console = Console(theme=splitscribe_theme, stderr=True, soft_wrap=True, highlight=False)
        self.output_mode = "standard"
        self.initialized = True

        install_rich_traceback(console=self.err_console, show_locals=False)

    def configure(self, debug: bool = False):
        """Switch between standard output and verbose (debug) output."""
        self.output_mode = "verbose" if debug else "standard"

    def print(self, *args, **kwargs):
        kwargs.setdefault("markup", False)
        self.console.print(*args, **kwargs)

    def success(self, message: str):
        self.console.print(message, style="success", markup=False)

    def warning(self, message: str):
        self.err_console.print(message, style="warning", markup=False)

    def error(self, message: str, hint: Optional[str] = None):
        self.err_console.print(f"Error: {message}", style="error", markup=False)
        if hint:
            self.err_console.print(hint, markup=False)

    def verbose_error(self, operation: str, error: Exception):
        """
        Output detailed error information, only in verbose mode.
        """
        if self.output_mode != "verbose":
            return

        error_block = f"""
=== SPLITSCRIBE ERROR REPORT ===
Operation: {operation}
Error Type: {type(error).__name__}
Error Message: {str(error)}

Traceback:
{traceback.format_exc()}
=== END ERROR REPORT ===
"""
        self.err_console.print(error_block, style="dim", markup=False)

    @contextmanager
    def status(self, message: str) -> ContextManager:
        """
        Show a spinner while a blocking call runs.
        In verbose mode, just log start/end.
        """
        if self.output_mode == "verbose":
            self.err_console.log(f"Started: {message}", markup=False)
            try:
                yield
            finally:
                self.err_console.log(f"Finished: {message}", markup=False)
            return

        with self.err_console.status(f"[bold cyan]{escape(message)}", spinner="dots"):
            yield

# Global instance
console = ConsoleManager()
