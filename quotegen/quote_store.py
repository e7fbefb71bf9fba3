from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

import json
import threading

from .errors import DuplicateError, ValidationError
from .models import ALL_CATEGORIES, Quote, validate_quote
from .storage import KeyValueStore


QUOTES_KEY = "dqg_quotes_v1"

T = TypeVar("T")

SEED_QUOTES: Tuple[Quote, ...] = (
	Quote(text="The best way to get started is to quit talking and begin doing.", category="Motivation"),
	Quote(text="Life is what happens when you're busy making other plans.", category="Life"),
	Quote(text="Success is not final, failure is not fatal: It is the courage to continue that counts.", category="Success"),
)


class QuoteStore:
	def __init__(
		self,
		storage: KeyValueStore,
		key: str = QUOTES_KEY,
		seed: Optional[Iterable[Quote]] = None,
	):
		self.storage = storage
		self.key = key
		self.seed: Tuple[Quote, ...] = tuple(SEED_QUOTES if seed is None else seed)
		self._lock = threading.RLock()
		self._quotes: List[Quote] = self.load()

	def load(self) -> List[Quote]:
		"""Read the persisted collection, falling back to the seed set.

		Missing or corrupt data is an expected first-run state, so nothing
		here raises; entries that fail validation are dropped.
		"""
		raw = self.storage.get(self.key)
		if raw is None:
			return list(self.seed)
		try:
			data = json.loads(raw)
		except ValueError:
			return list(self.seed)
		if not isinstance(data, list):
			return list(self.seed)
		quotes = [q for q in (validate_quote(item) for item in data) if q is not None]
		if not quotes:
			return list(self.seed)
		return quotes

	def _persist(self, quotes: Sequence[Quote]):
		payload = json.dumps([q.to_dict() for q in quotes], ensure_ascii=False)
		self.storage.set(self.key, payload)

	@property
	def quotes(self) -> Tuple[Quote, ...]:
		with self._lock:
			return tuple(self._quotes)

	def add(self, text: str, category: str) -> Quote:
		text = (text or "").strip()
		category = (category or "").strip()
		if not text or not category:
			raise ValidationError("Please fill in both the quote text and its category.")
		candidate = Quote(text=text, category=category)
		with self._lock:
			if any(q.same_entry(candidate) for q in self._quotes):
				raise DuplicateError(f'"{text}" is already stored under {category}.')
			self._persist(self._quotes + [candidate])
			self._quotes.append(candidate)
		return candidate

	def list_quotes(self, category: str = ALL_CATEGORIES) -> List[Quote]:
		with self._lock:
			if category == ALL_CATEGORIES:
				return list(self._quotes)
			return [q for q in self._quotes if q.category == category]

	def categories(self) -> List[str]:
		with self._lock:
			seen: List[str] = []
			for q in self._quotes:
				if q.category not in seen:
					seen.append(q.category)
		# sorted() is stable, so case-insensitive ties keep insertion order
		return sorted(seen, key=str.lower)

	def replace_all(self, quotes: Sequence[Quote]) -> None:
		with self._lock:
			new_quotes = list(quotes)
			self._persist(new_quotes)
			self._quotes = new_quotes

	def update(self, fn: Callable[[List[Quote]], Tuple[Optional[Sequence[Quote]], T]]) -> T:
		"""Read, rewrite and persist the collection as one step.

		`fn` gets a copy of the current quotes and returns `(new_quotes, result)`;
		no write happens when `new_quotes` is None. Other mutations wait until
		the new collection is committed.
		"""
		with self._lock:
			new_quotes, result = fn(list(self._quotes))
			if new_quotes is not None:
				new_quotes = list(new_quotes)
				self._persist(new_quotes)
				self._quotes = new_quotes
		return result

	def count(self) -> int:
		with self._lock:
			return len(self._quotes)

	def __len__(self) -> int:
		return self.count()
