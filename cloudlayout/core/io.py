"""
Load word lists from JSON, CSV or inline text.
JSON: [{"text": ..., "weight": ..., "color": ...}, ...] or {"word": weight, ...}.
CSV: header row with text,weight[,color].
Inline: "python:10,data:5" (weight defaults to 1).
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from cloudlayout.core.types import WordItem


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _word_from_obj(obj: Any, index: int) -> WordItem:
    if not isinstance(obj, dict):
        raise ValueError(f"Word entry {index} must be an object, got {type(obj).__name__}")
    if "text" not in obj:
        raise ValueError(f"Word entry {index} has no 'text'")
    weight = obj.get("weight", 1)
    try:
        weight = float(weight)
    except (TypeError, ValueError):
        raise ValueError(f"Word entry {index} has non-numeric weight {weight!r}") from None
    color = obj.get("color") or None
    return WordItem(text=str(obj["text"]), weight=weight, color=color)


def words_from_json(data: Any) -> list[WordItem]:
    """Accept a list of word objects or a {text: weight} mapping."""
    if isinstance(data, dict):
        return [WordItem(text=str(k), weight=float(v)) for k, v in data.items()]
    if isinstance(data, list):
        return [_word_from_obj(obj, i) for i, obj in enumerate(data)]
    raise ValueError("Word JSON must be a list of objects or an object mapping text to weight")


def words_from_csv(text: str) -> list[WordItem]:
    reader = csv.DictReader(text.splitlines())
    if reader.fieldnames is None or "text" not in reader.fieldnames:
        raise ValueError("Word CSV needs a header row with at least 'text' and 'weight' columns")
    return [_word_from_obj(dict(row), i) for i, row in enumerate(reader)]


def parse_words_text(text: str) -> list[WordItem]:
    """Parse 'python:10,data:5' or a JSON list/object string."""
    text = (text or "").strip()
    if not text:
        return []
    if text[0] in "[{":
        return words_from_json(json.loads(text))
    out: list[WordItem] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        word, sep, weight = part.rpartition(":")
        if not sep:
            out.append(WordItem(text=part, weight=1.0))
            continue
        try:
            out.append(WordItem(text=word.strip(), weight=float(weight)))
        except ValueError:
            raise ValueError(f"Bad word entry {part!r}; expected 'text:weight'") from None
    return out


def load_words(path: str | Path, repo_root: Path | None = None) -> list[WordItem]:
    """
    Load words from a .json or .csv file (anything else is read as inline text).
    Raises FileNotFoundError if path is missing, ValueError if the content is invalid.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Word file not found: {resolved}")
    content = resolved.read_text(encoding="utf-8")
    suffix = resolved.suffix.lower()
    if suffix == ".json":
        return words_from_json(json.loads(content))
    if suffix == ".csv":
        return words_from_csv(content)
    return parse_words_text(content.replace("\n", ","))
