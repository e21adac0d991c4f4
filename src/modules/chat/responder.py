"""Keyword responder — canned help-desk replies sent before a human agent joins.

The engine is a pure function of its input text. Keyword categories are
plain data; deployments add phrases (for example more transliterated
variants) through a JSON file instead of code changes::

    {"payments": ["fonepay", "card declined"], "greeting": ["namaskar"]}
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from src.config import settings
from src.modules.chat.constants import DEFAULT_KEYWORD_TABLE, HELP_MENU_TEXT, MENU_SHORTCUTS

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Trim, lowercase and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", (text or "").strip().lower())


@dataclass(frozen=True)
class KeywordCategory:
    name: str
    keywords: tuple[str, ...]
    reply: str

    def matches(self, text: str) -> bool:
        return any(text == keyword or keyword in text for keyword in self.keywords)


def build_categories(
    table: list[tuple[str, list[str], str]],
    extra_keywords: dict[str, list[str]] | None = None,
) -> tuple[KeywordCategory, ...]:
    """Turn a keyword table into ordered categories, merging extra keywords by name."""
    extra_keywords = extra_keywords or {}
    unknown = set(extra_keywords) - {name for name, _, _ in table}
    if unknown:
        raise ValueError(f"Unknown responder categories: {sorted(unknown)}")

    categories = []
    for name, keywords, reply in table:
        merged: list[str] = []
        for keyword in [*keywords, *extra_keywords.get(name, [])]:
            normalized = normalize(keyword)
            if normalized and normalized not in merged:
                merged.append(normalized)
        categories.append(KeywordCategory(name=name, keywords=tuple(merged), reply=reply))
    return tuple(categories)


def load_extra_keywords(path: str | Path) -> dict[str, list[str]]:
    """Read a ``{category: [keyword, ...]}`` JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not all(
        isinstance(v, list) and all(isinstance(k, str) for k in v) for v in data.values()
    ):
        raise ValueError(f"{path}: expected an object mapping category names to string lists")
    return data


class ResponderEngine:
    """Maps free text to a canned reply. First matching category wins."""

    def __init__(
        self,
        categories: tuple[KeywordCategory, ...] | None = None,
        shortcuts: dict[str, str] | None = None,
        fallback: str = HELP_MENU_TEXT,
    ) -> None:
        self.categories = categories if categories is not None else build_categories(DEFAULT_KEYWORD_TABLE)
        self.shortcuts = dict(shortcuts if shortcuts is not None else MENU_SHORTCUTS)
        self.fallback = fallback

    def classify(self, text: str) -> str | None:
        """Return the name of the matching category, or None for the fallback."""
        normalized = normalize(text)
        normalized = self.shortcuts.get(normalized, normalized)
        if not normalized:
            return None
        for category in self.categories:
            if category.matches(normalized):
                return category.name
        return None

    def reply(self, text: str) -> str:
        name = self.classify(text)
        if name is None:
            return self.fallback
        return next(c.reply for c in self.categories if c.name == name)


@lru_cache(maxsize=1)
def get_responder() -> ResponderEngine:
    """Process-wide responder built from the defaults plus any configured keyword file."""
    extra = None
    if settings.chat_responder_keywords_file:
        extra = load_extra_keywords(settings.chat_responder_keywords_file)
        logger.info(
            "Loaded extra responder keywords for %d categories from %s",
            len(extra),
            settings.chat_responder_keywords_file,
        )
    return ResponderEngine(categories=build_categories(DEFAULT_KEYWORD_TABLE, extra))
