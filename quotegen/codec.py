from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

import json

from .errors import FormatError
from .models import Quote, validate_quote
from .quote_store import QuoteStore


EXPORT_FILENAME = "quotes.json"


@dataclass(frozen=True)
class Ok:
	value: Any


@dataclass(frozen=True)
class Err:
	error: FormatError


ParseResult = Union[Ok, Err]


@dataclass(frozen=True)
class ImportSummary:
	imported: int
	skipped: int


def export_json(quotes: Sequence[Quote]) -> str:
	return json.dumps([q.to_dict() for q in quotes], ensure_ascii=False, indent=2)


def write_export(quotes: Sequence[Quote], directory: Union[str, Path] = ".") -> Path:
	target = Path(directory)
	target.mkdir(parents=True, exist_ok=True)
	path = target / EXPORT_FILENAME
	path.write_text(export_json(quotes) + "\n", encoding="utf-8")
	return path


def parse_document(raw: str) -> ParseResult:
	"""Parse an uploaded document into a list of raw elements.

	Returns Err instead of raising when the text is not JSON or the top
	level is not an array.
	"""
	try:
		data = json.loads(raw)
	except (TypeError, ValueError) as e:
		return Err(FormatError(f"Not valid JSON: {e}"))
	if not isinstance(data, list):
		return Err(FormatError("Expected a JSON array of quotes."))
	return Ok(data)


def import_json(store: QuoteStore, raw: str) -> ImportSummary:
	parsed = parse_document(raw)
	if isinstance(parsed, Err):
		raise parsed.error
	candidates = [validate_quote(item) for item in parsed.value]

	def append_new(existing: List[Quote]) -> Tuple[Optional[List[Quote]], ImportSummary]:
		new_ones: List[Quote] = []
		skipped = 0
		for quote in candidates:
			if quote is None:
				skipped += 1
				continue
			if any(quote.same_entry(q) for q in existing) or any(quote.same_entry(q) for q in new_ones):
				skipped += 1
				continue
			new_ones.append(quote)
		summary = ImportSummary(imported=len(new_ones), skipped=skipped)
		return (existing + new_ones if new_ones else None), summary

	return store.update(append_new)


def import_file(store: QuoteStore, path: Union[str, Path]) -> ImportSummary:
	try:
		raw = Path(path).read_text(encoding="utf-8")
	except UnicodeDecodeError as e:
		raise FormatError(f"{path} is not UTF-8 text: {e}") from e
	return import_json(store, raw)
