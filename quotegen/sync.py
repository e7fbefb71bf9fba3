from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import threading

from .errors import SyncError
from .models import Quote
from .quote_store import QuoteStore
from .sources import DEFAULT_SYNC_LIMIT, map_records


class SyncStatus(str, Enum):
	SYNCING = "syncing"
	SUCCEEDED = "succeeded"
	FAILED = "failed"
	SKIPPED = "skipped"


@dataclass(frozen=True)
class SyncResult:
	status: SyncStatus
	reason: Optional[str] = None
	added: int = 0
	updated: int = 0

	@property
	def ok(self) -> bool:
		return self.status == SyncStatus.SUCCEEDED


def merge_quotes(local: Sequence[Quote], remote: Sequence[Quote]) -> List[Quote]:
	"""Merge remote quotes into local ones keyed by exact text.

	A key keeps the position of its first appearance while the last value
	written for it wins, so a remote quote replaces a local quote with the
	same text in place and unmatched remote quotes land at the end.
	"""
	merged: Dict[str, Quote] = {}
	for q in list(local) + list(remote):
		merged[q.text] = q
	return list(merged.values())


class SyncEngine:
	def __init__(
		self,
		store: QuoteStore,
		fetch_remote: Callable[[], List[Any]],
		on_status: Optional[Callable[[SyncResult], None]] = None,
		limit: int = DEFAULT_SYNC_LIMIT,
	):
		self.store = store
		self.fetch_remote = fetch_remote
		self.on_status = on_status
		self.limit = limit
		self._in_progress = threading.Lock()
		self.last_result: Optional[SyncResult] = None

	def _report(self, result: SyncResult) -> SyncResult:
		self.last_result = result
		if self.on_status is not None:
			self.on_status(result)
		return result

	@property
	def in_progress(self) -> bool:
		return self._in_progress.locked()

	def sync_once(self) -> SyncResult:
		# One cycle at a time: a trigger that arrives mid-cycle is dropped
		if not self._in_progress.acquire(blocking=False):
			return self._report(SyncResult(SyncStatus.SKIPPED, reason="sync already in progress"))
		try:
			self._report(SyncResult(SyncStatus.SYNCING))
			try:
				records = self.fetch_remote()
				if not isinstance(records, list):
					raise SyncError("server response is not a list of records")
				remote = map_records(records, self.limit)
			except Exception as e:
				return self._report(SyncResult(SyncStatus.FAILED, reason=str(e) or type(e).__name__))

			def merge_in(local: List[Quote]) -> Tuple[List[Quote], Tuple[int, int]]:
				local_by_text = {q.text: q for q in local}
				merged = merge_quotes(local, remote)
				added = len(merged) - len(merge_quotes(local, []))
				updated = len({q.text for q in remote if q.text in local_by_text and local_by_text[q.text] != q})
				return merged, (added, updated)

			try:
				added, updated = self.store.update(merge_in)
			except OSError as e:
				return self._report(SyncResult(SyncStatus.FAILED, reason=f"could not save merged quotes: {e}"))
			return self._report(SyncResult(SyncStatus.SUCCEEDED, added=added, updated=updated))
		finally:
			self._in_progress.release()

	def schedule_recurring(self, interval_seconds: float) -> "RecurringSync":
		return RecurringSync(self, interval_seconds).start()


class RecurringSync:
	"""Start/stop handle for a background thread running sync cycles."""

	def __init__(self, engine: SyncEngine, interval_seconds: float):
		if interval_seconds <= 0:
			raise ValueError("interval_seconds must be positive")
		self.engine = engine
		self.interval_seconds = interval_seconds
		self._stop_event = threading.Event()
		self._thread: Optional[threading.Thread] = None

	@property
	def running(self) -> bool:
		return self._thread is not None and self._thread.is_alive()

	def start(self) -> "RecurringSync":
		if self.running:
			return self
		self._stop_event.clear()
		self._thread = threading.Thread(target=self._run, name="quotegen-sync", daemon=True)
		self._thread.start()
		return self

	def _run(self):
		while not self._stop_event.wait(self.interval_seconds):
			self.engine.sync_once()

	def stop(self, timeout: Optional[float] = None) -> None:
		self._stop_event.set()
		if self._thread is not None:
			self._thread.join(timeout)
		self._thread = None
