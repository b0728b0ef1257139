"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from markup_style_linter.infrastructure.di.container import MarkupStyleContainer
from markup_style_linter.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = MarkupStyleContainer()

    deps = CLIDependencies(
        telemetry=container.get_telemetry_port(),
        guidance_service=container.get_guidance_service(),
        config_loader=container.get_config_loader(),
        batch_factory=container.build_check_batch,
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
