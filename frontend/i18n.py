from __future__ import annotations

import logging
import threading
from typing import Callable, Mapping

LOGGER = logging.getLogger(__name__)


class Translator:
    def __init__(self, lang: str, messages: Mapping[str, str] | None = None):
        self.lang = lang
        self.messages = dict(messages or {})

    def __call__(self, key: str) -> str:
        return self.messages.get(key) or key

    def label(self, key: str, fallback: str) -> str:
        return self.messages.get(key) or fallback


class TranslationCatalog:
    """Per-language translation tables, fetched lazily.

    A failed fetch yields an empty table (keys render as-is) and is not cached,
    so the next page load tries again.
    """

    def __init__(self, loader: Callable[[str], Mapping[str, str]]):
        self._loader = loader
        self._tables: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def get(self, lang: str) -> Translator:
        with self._lock:
            cached = self._tables.get(lang)
        if cached is not None:
            return Translator(lang, cached)

        try:
            table = dict(self._loader(lang))
        except Exception as exc:
            LOGGER.warning("Failed to load translations for %s: %s", lang, exc)
            return Translator(lang)

        with self._lock:
            self._tables[lang] = table
        return Translator(lang, table)

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()
