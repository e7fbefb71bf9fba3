from __future__ import annotations

from typing import Dict, Optional

import json
import os

from filelock import FileLock


class KeyValueStore:
	def get(self, key: str) -> Optional[str]:
		raise NotImplementedError

	def set(self, key: str, value: str) -> None:
		raise NotImplementedError

	def remove(self, key: str) -> None:
		raise NotImplementedError


class MemoryStore(KeyValueStore):
	"""Session-scoped store: contents vanish with the process."""

	def __init__(self):
		self._data: Dict[str, str] = {}

	def get(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set(self, key: str, value: str) -> None:
		self._data[key] = str(value)

	def remove(self, key: str) -> None:
		self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
	"""Durable store kept as one JSON object of string values.

	Every write rewrites the whole file through a temp file and os.replace,
	so readers never observe a partial write.
	"""

	def __init__(self, path: str):
		self.path = path
		parent = os.path.dirname(path)
		if parent:
			os.makedirs(parent, exist_ok=True)
		self._lock = FileLock(path + ".lock")

	def _read_all(self) -> Dict[str, str]:
		if not os.path.exists(self.path):
			return {}
		try:
			with open(self.path, "r", encoding="utf-8") as f:
				data = json.load(f)
		except (OSError, ValueError):
			return {}
		if not isinstance(data, dict):
			return {}
		return {str(k): v for k, v in data.items() if isinstance(v, str)}

	def _write_all(self, data: Dict[str, str]) -> None:
		tmp_path = self.path + ".tmp"
		with open(tmp_path, "w", encoding="utf-8") as f:
			json.dump(data, f, ensure_ascii=False, indent=2)
		os.replace(tmp_path, self.path)

	def get(self, key: str) -> Optional[str]:
		with self._lock:
			return self._read_all().get(key)

	def set(self, key: str, value: str) -> None:
		with self._lock:
			data = self._read_all()
			data[key] = str(value)
			self._write_all(data)

	def remove(self, key: str) -> None:
		with self._lock:
			data = self._read_all()
			if key in data:
				del data[key]
				self._write_all(data)
