from __future__ import annotations

import os

from pydantic import BaseModel
from dotenv import load_dotenv


class AppConfig(BaseModel):
	# Durable store (quotes + remembered filter)
	store_path: str = "quotes_store.json"

	# Remote feed
	remote_url: str = "https://jsonplaceholder.typicode.com/posts"
	timeout_s: int = 10

	# Sync behavior
	sync_interval_s: float = 30.0
	sync_limit: int = 5

	# Export target directory for quotes.json
	export_dir: str = "."

	@classmethod
	def load(cls) -> "AppConfig":
		# Load .env if present
		load_dotenv(override=False)

		return cls(
			store_path=os.getenv("QUOTES_STORE_PATH", "quotes_store.json"),
			remote_url=os.getenv("QUOTES_REMOTE_URL", "https://jsonplaceholder.typicode.com/posts"),
			timeout_s=int(os.getenv("QUOTES_TIMEOUT_S", "10")),
			sync_interval_s=float(os.getenv("QUOTES_SYNC_INTERVAL_S", "30")),
			sync_limit=int(os.getenv("QUOTES_SYNC_LIMIT", "5")),
			export_dir=os.getenv("QUOTES_EXPORT_DIR", "."),
		)
