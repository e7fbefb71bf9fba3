from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


ALL_CATEGORIES = "all"


class Quote(BaseModel):
	model_config = ConfigDict(frozen=True)

	text: str
	category: str

	def to_dict(self) -> Dict[str, str]:
		return {"text": self.text, "category": self.category}

	def same_entry(self, other: "Quote") -> bool:
		# Direct adds are unique on (text, category), ignoring case
		return (
			self.text.lower() == other.text.lower()
			and self.category.lower() == other.category.lower()
		)


def _non_blank(value: Any) -> bool:
	return isinstance(value, str) and bool(value.strip())


def validate_quote(raw: Any) -> Optional[Quote]:
	"""Return a Quote for a well-formed {text, category} mapping, else None."""
	if isinstance(raw, Quote):
		raw = raw.to_dict()
	if not isinstance(raw, dict):
		return None
	text = raw.get("text")
	category = raw.get("category")
	if not _non_blank(text) or not _non_blank(category):
		return None
	return Quote(text=text, category=category)
