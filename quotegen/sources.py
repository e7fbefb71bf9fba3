from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from .errors import SyncError
from .models import Quote, validate_quote


SERVER_CATEGORY = "Server"
DEFAULT_SYNC_LIMIT = 5


class RemoteQuoteSource:
	"""HTTP client for the remote feed merged in by SyncEngine."""

	def __init__(self, url: str, timeout_seconds: int = 10):
		self.url = url
		self.timeout_seconds = max(1, int(timeout_seconds))

	def fetch(self) -> List[Any]:
		try:
			r = requests.get(self.url, timeout=self.timeout_seconds)
			r.raise_for_status()
			data = r.json()
		except requests.RequestException as e:
			raise SyncError(f"fetch failed: {e}") from e
		except ValueError as e:
			raise SyncError(f"server returned invalid JSON: {e}") from e
		if not isinstance(data, list):
			raise SyncError("server response is not a list of records")
		return data

	def post(self, quote: Quote) -> Optional[Dict[str, Any]]:
		payload = {"title": quote.text, "body": quote.category, "userId": 1}
		try:
			r = requests.post(self.url, json=payload, timeout=self.timeout_seconds)
			r.raise_for_status()
			data = r.json() if r.content else None
		except requests.RequestException as e:
			raise SyncError(f"publish failed: {e}") from e
		except ValueError as e:
			raise SyncError(f"server returned invalid JSON: {e}") from e
		return data if isinstance(data, dict) else None


def map_records(records: List[Any], limit: int = DEFAULT_SYNC_LIMIT) -> List[Quote]:
	# The feed has no categories of its own; everything it sends is labelled Server
	quotes: List[Quote] = []
	for rec in records[:limit]:
		quote = validate_quote({"text": rec.get("title"), "category": SERVER_CATEGORY}) if isinstance(rec, dict) else None
		if quote is not None:
			quotes.append(quote)
	return quotes
