import threading
from typing import TYPE_CHECKING, Any, Optional, cast

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from markup_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from markup_style_linter.infrastructure.services.guidance_service import GuidanceService
from markup_style_linter.interface.telemetry import ProjectTelemetry
from markup_style_linter.use_cases.apply_fixes import ApplyFixesUseCase
from markup_style_linter.use_cases.check_batch import CheckBatchUseCase
from markup_style_linter.use_cases.lint_file import LintFileUseCase

if TYPE_CHECKING:
    from markup_style_linter.domain.protocols import (
        FileSystemProtocol,
        GuidanceServiceProtocol,
        TelemetryPort,
    )


class MarkupStyleContainer:
    """Dependency Injection Container for the markup style linter."""

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        telemetry = ProjectTelemetry(
            "MARKUP-STYLE", "cyan", "House style checks online")
        self.register_singleton("TelemetryPort", telemetry)
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("GuidanceService", GuidanceService())
        self.register_singleton("ConfigFileLoader", ConfigFileLoader())
        self.register_singleton("CancelEvent", threading.Event())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_guidance_service(self) -> "GuidanceServiceProtocol":
        """Return the rule registry service."""
        return cast("GuidanceServiceProtocol", self.get("GuidanceService"))

    def get_config_loader(self) -> ConfigFileLoader:
        """Return the configuration file loader."""
        return cast(ConfigFileLoader, self.get("ConfigFileLoader"))

    def get_cancel_event(self) -> threading.Event:
        """Return the run-wide cancellation event."""
        return cast(threading.Event, self.get("CancelEvent"))

    def build_check_batch(
        self,
        config: StyleConfiguration,
        telemetry: Optional["TelemetryPort"] = None,
    ) -> CheckBatchUseCase:
        """Wire the per-run use cases for one resolved configuration. Raises ConfigurationError."""
        telemetry = telemetry or self.get_telemetry_port()
        lint_use_case = LintFileUseCase(config, telemetry)
        return CheckBatchUseCase(
            filesystem=self.get_filesystem(),
            lint_use_case=lint_use_case,
            telemetry=telemetry,
            fix_use_case=ApplyFixesUseCase(lint_use_case, telemetry),
            cancel_event=self.get_cancel_event(),
        )
