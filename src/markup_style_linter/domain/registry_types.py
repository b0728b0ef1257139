from typing import TypedDict


class RuleRegistryEntry(TypedDict, total=False):
    rule_id: str
    display_name: str
    short_description: str
    dialects: list[str]
    severity: str
    fixable: bool
    manual_instructions: str
    proactive_guidance: str
    example_bad: str
    example_good: str
