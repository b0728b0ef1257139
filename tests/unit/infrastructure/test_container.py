import threading

import pytest

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.infrastructure.di.container import MarkupStyleContainer
from markup_style_linter.use_cases.check_batch import CheckBatchUseCase


class TestMarkupStyleContainer:
    def test_initialization_registers_telemetry(self) -> None:
        container = MarkupStyleContainer()
        telemetry = container.get("TelemetryPort")
        assert telemetry is not None
        assert telemetry.project_name == "MARKUP-STYLE"

    def test_register_and_get_singleton(self) -> None:
        container = MarkupStyleContainer()
        mock_dep = {"foo": "bar"}
        container.register_singleton("MockDep", mock_dep)

        retrieved = container.get("MockDep")
        assert retrieved is mock_dep

    def test_get_missing_dependency_raises_error(self) -> None:
        container = MarkupStyleContainer()
        with pytest.raises(ValueError, match=r"Dependency 'Missing' not registered\."):
            container.get("Missing")

    def test_build_check_batch_shares_cancel_event(self) -> None:
        container = MarkupStyleContainer()
        event = threading.Event()
        container.register_singleton("CancelEvent", event)

        batch = container.build_check_batch(StyleConfiguration(jobs=1))
        assert isinstance(batch, CheckBatchUseCase)
        assert batch.filesystem is container.get_filesystem()
        batch.cancel()
        assert event.is_set()
