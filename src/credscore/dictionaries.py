"""
Static term and domain dictionaries shared by every analysis.
Loaded once at startup from bundled JSON and frozen into tuples.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"
DATA_FILES = ("terms.json", "sources.json")


@dataclass(frozen=True)
class TermDictionaries:
    conspiracy_terms: tuple[str, ...] = ()
    emotive_words: tuple[str, ...] = ()
    urgency_phrases: tuple[str, ...] = ()
    emotional_words: tuple[str, ...] = ()
    urgency_words: tuple[str, ...] = ()
    sensationalism_words: tuple[str, ...] = ()
    bias_words: tuple[str, ...] = ()
    sensationalist_words: tuple[str, ...] = ()
    credibility_indicators: tuple[str, ...] = ()
    trusted_domains: tuple[str, ...] = ()
    trusted_outlets: tuple[str, ...] = ()
    suspicious_suffixes: tuple[str, ...] = ()

    def sizes(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in self.__dataclass_fields__}


def load_json(path: Path) -> Any:
    """Load a JSON file with UTF-8 encoding."""
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _dedup_terms(values: Iterable[Any]) -> List[str]:
    seen = set()
    output: List[str] = []
    for val in values:
        if not isinstance(val, str):
            continue
        term = val.strip().lower()
        if not term or term in seen:
            continue
        seen.add(term)
        output.append(term)
    return output


def _normalize_suffix(value: str) -> str:
    return value if value.startswith(".") else f".{value}"


def load_dictionaries(
    data_dir: str | os.PathLike[str] | None = None,
    *,
    extra_trusted_domains: Iterable[str] = (),
    extra_suspicious_suffixes: Iterable[str] = (),
) -> TermDictionaries:
    """
    Load every known JSON file in data_dir and merge the lists by key.
    Missing or unreadable files are skipped with a warning.
    """
    data_path = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    raw: Dict[str, Any] = {}

    if not data_path.exists():
        logger.warning("Data directory %s does not exist; using empty dictionaries", data_path)
    else:
        for fname in DATA_FILES:
            path = data_path / fname
            if not path.exists():
                logger.warning("Dictionary file %s is missing", path)
                continue
            try:
                payload = load_json(path)
            except (OSError, ValueError) as exc:
                logger.warning("Failed to load dictionary %s: %s", path, exc)
                continue
            if not isinstance(payload, dict):
                logger.warning("Dictionary %s is not a JSON object; skipped", path)
                continue
            raw.update(payload)

    fields = TermDictionaries.__dataclass_fields__
    values: Dict[str, tuple[str, ...]] = {}
    for name in fields:
        entries = raw.get(name, [])
        if not isinstance(entries, list):
            logger.warning("Dictionary key %s is not a list; ignored", name)
            entries = []
        if name == "trusted_domains":
            entries = entries + list(extra_trusted_domains)
        elif name == "suspicious_suffixes":
            entries = [_normalize_suffix(s) for s in _dedup_terms(entries + list(extra_suspicious_suffixes))]
        values[name] = tuple(_dedup_terms(entries))

    dictionaries = TermDictionaries(**values)
    logger.info("Loaded term dictionaries from %s: %s", data_path, dictionaries.sizes())
    return dictionaries
