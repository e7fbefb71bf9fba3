from __future__ import annotations

from typing import Iterable, Optional

import json

from .models import ALL_CATEGORIES, Quote, validate_quote
from .storage import KeyValueStore


FILTER_KEY = "dqg_last_filter"
LAST_VIEWED_KEY = "lastViewedQuote"


class FilterPreference:
	"""Remembers the last selected category across restarts."""

	def __init__(self, storage: KeyValueStore, key: str = FILTER_KEY):
		self.storage = storage
		self.key = key

	def save(self, category: str) -> None:
		self.storage.set(self.key, category)

	def restore(self, valid_categories: Iterable[str]) -> str:
		saved = self.storage.get(self.key)
		if not saved or saved == ALL_CATEGORIES:
			return ALL_CATEGORIES
		if saved not in set(valid_categories):
			return ALL_CATEGORIES
		return saved


class LastViewedQuote:
	def __init__(self, storage: KeyValueStore, key: str = LAST_VIEWED_KEY):
		self.storage = storage
		self.key = key

	def remember(self, quote: Quote) -> None:
		self.storage.set(self.key, json.dumps(quote.to_dict(), ensure_ascii=False))

	def recall(self) -> Optional[Quote]:
		raw = self.storage.get(self.key)
		if raw is None:
			return None
		try:
			return validate_quote(json.loads(raw))
		except ValueError:
			return None

	def clear(self) -> None:
		self.storage.remove(self.key)
