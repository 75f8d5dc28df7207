"""Normalization pipeline — run the three passes over fixture files.

Every file is an independent read, transform, write unit. Errors are not
caught here: invalid JSON raises ``json.JSONDecodeError`` and write failures
raise ``OSError``, so a run stops at the first bad file.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from pathlib import Path

from astnorm.config import NormalizeConfig
from astnorm.tree.models import Node
from astnorm.tree.transforms import (
    prune_unambiguous_types,
    split_multiline_text,
    strip_term_dashes,
)

# Unpaired UTF-16 halves that json.loads lets through from \ud83d style escapes
LONE_SURROGATE = re.compile("[\ud800-\udfff]")


@dataclass
class FileResult:
    """Outcome of normalizing one fixture file."""

    path: Path
    changed: bool
    written: bool = False


def normalize(tree: Node, config: NormalizeConfig | None = None) -> Node:
    """Apply dash stripping, type pruning and text splitting, in that order.

    Splitting must come last: it rewrites sequences, while the first two
    passes only touch named fields.
    """
    config = config or NormalizeConfig()
    tree = strip_term_dashes(tree)
    tree = prune_unambiguous_types(tree, config.rules)
    return split_multiline_text(tree, keep_blank_lines=config.keep_blank_lines)


def dumps(tree: Node, config: NormalizeConfig | None = None) -> str:
    """Serialize a tree the way fixtures are stored on disk.

    Lone surrogates are written as ``\\uXXXX`` escapes so the text always
    encodes to UTF-8.
    """
    config = config or NormalizeConfig()
    text = json.dumps(tree, indent=config.indent, ensure_ascii=False, allow_nan=False)
    return LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def loads(text: str) -> Node:
    """Parse fixture text. Numbers too large for a float become ``None``."""
    return json.loads(text, parse_float=_parse_float)


def normalize_text(text: str, config: NormalizeConfig | None = None) -> str:
    """Normalize a JSON document given as text and return the new text."""
    config = config or NormalizeConfig()
    return dumps(normalize(loads(text), config), config)


def normalize_file(
    path: str | Path, config: NormalizeConfig | None = None, check: bool = False
) -> FileResult:
    """Normalize one fixture in place.

    With ``check`` the file is left alone and only the ``changed`` flag is
    reported.
    """
    path = Path(path)
    original = path.read_text(encoding="utf-8")
    normalized = normalize_text(original, config)
    changed = normalized != original

    if check:
        return FileResult(path=path, changed=changed)

    # Encode before opening so a failure cannot leave the file truncated
    data = normalized.encode("utf-8")
    path.write_bytes(data)
    return FileResult(path=path, changed=changed, written=True)


def discover_fixtures(directory: str | Path, pattern: str = "*.json") -> list[Path]:
    """List fixture files directly inside ``directory`` (not recursive)."""
    directory = Path(directory)
    return sorted(p for p in directory.glob(pattern) if p.is_file())


def normalize_directory(
    directory: str | Path, config: NormalizeConfig | None = None, check: bool = False
) -> list[FileResult]:
    """Normalize every fixture in ``directory``, stopping at the first error."""
    config = config or NormalizeConfig()
    return [
        normalize_file(path, config, check=check)
        for path in discover_fixtures(directory, config.pattern)
    ]


def _parse_float(literal: str) -> float | None:
    value = float(literal)
    return value if math.isfinite(value) else None
