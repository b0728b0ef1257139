"""Load [tool.markup-style] from pyproject.toml, or a YAML/TOML config file. Infrastructure I/O only."""

import tomllib
from pathlib import Path
from typing import Optional

import yaml

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.exceptions import ConfigurationError

TOOL_SECTION = "markup-style"
YAML_CONFIG_NAME = ".markup-style.yaml"


class ConfigFileLoader:
    """
    Finds and reads configuration. Precedence: explicit --config file, then
    [tool.markup-style] in the nearest pyproject.toml, then .markup-style.yaml
    in the working directory, then defaults.
    """

    @staticmethod
    def load(config_path: Optional[str] = None, cwd: Optional[Path] = None) -> StyleConfiguration:
        """Resolve the configuration for this run. Raises ConfigurationError."""
        if config_path:
            raw = ConfigFileLoader.load_config_file(Path(config_path))
        else:
            raw = ConfigFileLoader.load_config_from_fs(cwd)
        return StyleConfiguration.from_mapping(raw)

    @staticmethod
    def load_config_from_fs(cwd: Optional[Path] = None) -> dict[str, object]:
        """Return the discovered configuration section, or {} for defaults."""
        start = cwd or Path.cwd()
        current_path = start
        root_path = Path(current_path.anchor)
        while True:
            config_file = current_path / "pyproject.toml"
            if config_file.exists():
                section = ConfigFileLoader._pyproject_section(config_file)
                if section is not None:
                    return section
                break
            if current_path == root_path:
                break
            current_path = current_path.parent
        yaml_file = start / YAML_CONFIG_NAME
        if yaml_file.exists():
            return ConfigFileLoader._read_yaml(yaml_file)
        return {}

    @staticmethod
    def load_config_file(path: Path) -> dict[str, object]:
        """Read an explicit YAML or TOML config file."""
        if not path.exists():
            raise ConfigurationError(f"config file not found: {path}")
        if path.suffix == ".toml":
            data = ConfigFileLoader._read_toml(path)
            tool_section = data.get("tool", {})
            if isinstance(tool_section, dict) and TOOL_SECTION in tool_section:
                return ConfigFileLoader._as_mapping(tool_section[TOOL_SECTION], path)
            return data
        if path.suffix in (".yaml", ".yml"):
            return ConfigFileLoader._read_yaml(path)
        raise ConfigurationError(f"unsupported config file type {path.suffix!r}; use .yaml, .yml or .toml")

    @staticmethod
    def _pyproject_section(config_file: Path) -> Optional[dict[str, object]]:
        data = ConfigFileLoader._read_toml(config_file)
        tool_section = data.get("tool", {}) or {}
        if not isinstance(tool_section, dict) or TOOL_SECTION not in tool_section:
            return None
        return ConfigFileLoader._as_mapping(tool_section[TOOL_SECTION], config_file)

    @staticmethod
    def _read_toml(path: Path) -> dict[str, object]:
        try:
            with path.open("rb") as f:
                return tomllib.load(f)
        except OSError as exc:
            raise ConfigurationError(f"cannot read {path}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"invalid TOML in {path}: {exc}") from exc

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, object]:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as exc:
            raise ConfigurationError(f"cannot read {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid YAML in {path}: {exc}") from exc
        return ConfigFileLoader._as_mapping(data, path)

    @staticmethod
    def _as_mapping(data: object, path: Path) -> dict[str, object]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: configuration must be a mapping")
        return data
