from __future__ import annotations

from typing import Optional, Sequence

import random

from .models import ALL_CATEGORIES, Quote


class RandomSelector:
	"""Picks quotes at random without showing the same one twice in a row.

	The no-repeat rule only holds while the category stays the same; a
	category change starts fresh.
	"""

	def __init__(self, rng: Optional[random.Random] = None):
		self.rng = rng or random.Random()
		self.reset()

	def reset(self) -> None:
		self.last_category = ALL_CATEGORIES
		self.last_index = -1

	def pick(self, pool: Sequence[Quote], category: str) -> Optional[Quote]:
		if not pool:
			return None
		size = len(pool)
		index = self.rng.randrange(size)
		if category == self.last_category and size > 1:
			while index == self.last_index:
				index = self.rng.randrange(size)
		self.last_category = category
		self.last_index = index
		return pool[index]
