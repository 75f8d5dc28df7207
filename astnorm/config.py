"""Normalizer configuration — the pruning table and run options.

Dropping a ``type`` field is only safe because the Fluent grammar allows a
single production at certain positions. That grammar contract lives here as
data (``PruneRules``) rather than inside the traversal, so it can be printed,
overridden from YAML, and tested on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# Productions whose position alone identifies them
DEFAULT_UNAMBIGUOUS_TYPES = frozenset({
    "Resource",
    "Pattern",
    "Function",
    "Variant",
    "SelectExpression",
    "Attribute",
    "NamedArgument",
    "VariantList",
    "Identifier",
})

# Selectors may hold several productions, so their type always stays
DEFAULT_EXEMPT_PARENT_KEYS = frozenset({"selector"})

# Types that are only implied under one specific parent key
DEFAULT_POSITIONAL_TYPES = {
    "key": frozenset({"NumberLiteral"}),
}

DEFAULT_INDENT = 4
DEFAULT_PATTERN = "*.json"

CONFIG_KEYS = {
    "unambiguous_types",
    "exempt_parent_keys",
    "positional_types",
    "keep_blank_lines",
    "indent",
    "pattern",
}


@dataclass
class PruneRules:
    """Which ``type`` discriminators the pruning pass may delete."""

    unambiguous_types: frozenset[str] = DEFAULT_UNAMBIGUOUS_TYPES
    exempt_parent_keys: frozenset[str] = DEFAULT_EXEMPT_PARENT_KEYS
    positional_types: dict[str, frozenset[str]] = field(
        default_factory=lambda: dict(DEFAULT_POSITIONAL_TYPES)
    )

    def should_prune(self, type_name: str, parent_key: str | int | None) -> bool:
        """Decide whether a node of ``type_name`` reached via ``parent_key`` loses its type.

        The exemption only shields the general set; positional rules name
        their parent key explicitly.
        """
        if parent_key not in self.exempt_parent_keys and type_name in self.unambiguous_types:
            return True
        return type_name in self.positional_types.get(parent_key, frozenset())

    def to_dict(self) -> dict:
        return {
            "unambiguous_types": sorted(self.unambiguous_types),
            "exempt_parent_keys": sorted(self.exempt_parent_keys),
            "positional_types": {
                key: sorted(types) for key, types in sorted(self.positional_types.items())
            },
        }


@dataclass
class NormalizeConfig:
    """Everything one normalizer run needs."""

    rules: PruneRules = field(default_factory=PruneRules)
    keep_blank_lines: bool = False
    indent: int = DEFAULT_INDENT
    pattern: str = DEFAULT_PATTERN


def load_config(path: str | Path) -> NormalizeConfig:
    """Load a normalizer config from a YAML file.

    Keys left out of the file keep their defaults.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping, got {type(data).__name__}")

    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(sorted(unknown))}")

    rules = PruneRules()
    if "unambiguous_types" in data:
        rules.unambiguous_types = frozenset(data["unambiguous_types"] or [])
    if "exempt_parent_keys" in data:
        rules.exempt_parent_keys = frozenset(data["exempt_parent_keys"] or [])
    if "positional_types" in data:
        rules.positional_types = {
            key: frozenset(types or []) for key, types in (data["positional_types"] or {}).items()
        }

    return NormalizeConfig(
        rules=rules,
        keep_blank_lines=bool(data.get("keep_blank_lines", False)),
        indent=int(data.get("indent", DEFAULT_INDENT)),
        pattern=data.get("pattern", DEFAULT_PATTERN),
    )
