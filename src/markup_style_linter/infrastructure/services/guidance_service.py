"""GuidanceService: loads the rule registry and provides manual_instructions and proactive_guidance."""

from pathlib import Path
from typing import cast

import yaml

from markup_style_linter.domain.constants import RULE_PREFIX
from markup_style_linter.domain.protocols import GuidanceServiceProtocol
from markup_style_linter.domain.registry_types import RuleRegistryEntry

_DEFAULT_KEY = f"{RULE_PREFIX}_default"


class GuidanceService(GuidanceServiceProtocol):
    """Loads rule_registry.yaml; entries are keyed `style.<rule-id>`."""

    def __init__(self, registry_path: str | None = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleRegistryEntry] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                self._registry = (
                    cast(dict[str, RuleRegistryEntry],
                         data) if isinstance(data, dict) else {}
                )
        else:
            self._registry = {}

    def get_entry(self, rule_id: str) -> RuleRegistryEntry | None:
        """Return the full registry entry for the rule, or None."""
        entry = self._registry.get(f"{RULE_PREFIX}{rule_id}")
        if not entry:
            return None
        result = cast(RuleRegistryEntry, dict(entry))
        result.setdefault("rule_id", rule_id)
        return result

    def get_manual_instructions(self, rule_id: str) -> str:
        """Return manual fix instructions, falling back to the registry default."""
        entry = self.get_entry(rule_id)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"])
        default_entry = self._registry.get(_DEFAULT_KEY)
        if default_entry and "manual_instructions" in default_entry:
            return str(default_entry["manual_instructions"])
        return "Fix the finding at the reported location."

    def get_proactive_guidance(self, rule_id: str) -> str:
        """Return proactive guidance (how to write markup that avoids the finding)."""
        entry = self.get_entry(rule_id)
        if entry and "proactive_guidance" in entry:
            return str(entry["proactive_guidance"])
        default_entry = self._registry.get(_DEFAULT_KEY)
        if default_entry and "proactive_guidance" in default_entry:
            return str(default_entry["proactive_guidance"])
        return "Follow the house style guide."
