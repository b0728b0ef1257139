"""ProjectTelemetry: user-facing progress on a rich console, mirrored to stdlib logging."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from markup_style_linter.domain.protocols import TelemetryPort

LOGGER_NAME = "markup_style_linter"


class ProjectTelemetry(TelemetryPort):
    """
    Telemetry port implementation.

    Steps, warnings and errors are printed to stderr (stdout stays clean for
    JSON output) and logged. Debug records are only logged; verbose mode
    attaches a handler that shows them.
    """

    def __init__(self, project_name: str, color: str, welcome_message: str) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome_message = welcome_message
        self.console = Console(stderr=True)
        self.logger = logging.getLogger(LOGGER_NAME)
        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())
        self._verbose_handler: logging.Handler | None = None

    def set_verbose(self, verbose: bool) -> None:
        """Show debug records on the console when verbose."""
        if verbose and self._verbose_handler is None:
            handler = RichHandler(console=self.console, show_path=False)
            handler.setLevel(logging.DEBUG)
            handler.addFilter(lambda record: record.levelno == logging.DEBUG)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.DEBUG)
            self._verbose_handler = handler
        elif not verbose and self._verbose_handler is not None:
            self.logger.removeHandler(self._verbose_handler)
            self.logger.setLevel(logging.NOTSET)
            self._verbose_handler = None

    def handshake(self) -> None:
        self.console.print(f"[bold {self.color}]{self.project_name}[/] {self.welcome_message}")
        self.logger.info("%s: %s", self.project_name, self.welcome_message)

    def step(self, message: str) -> None:
        self.console.print(f"[{self.color}]>[/] {message}")
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]warning:[/] {message}")
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]error:[/] {message}")
        self.logger.error(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)
