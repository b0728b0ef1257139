from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional, Protocol

from markup_style_linter.domain.registry_types import RuleRegistryEntry

if TYPE_CHECKING:
    from markup_style_linter.domain.entities import RunReport


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def debug(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def discover_sources(self, paths: Sequence[str], exclude: Sequence[str] = ()) -> list[str]:
        """Expand files and directories into supported source files, in stable order."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file. Raises IOFailure."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file. Raises IOFailure."""
        ...


class GuidanceServiceProtocol(Protocol):
    """Protocol for the rule registry. Implemented by GuidanceService in infrastructure."""

    def get_entry(self, rule_id: str) -> Optional[RuleRegistryEntry]:
        """Return the full registry entry for the rule, or None."""
        ...

    def get_manual_instructions(self, rule_id: str) -> str:
        """Return manual fix instructions for the rule."""
        ...

    def get_proactive_guidance(self, rule_id: str) -> str:
        """Return proactive guidance for the rule."""
        ...


class ReporterProtocol(Protocol):
    """Renders a RunReport for humans or machines."""

    def report(self, run: "RunReport") -> None:
        """Write the report to the reporter's output."""
        ...
