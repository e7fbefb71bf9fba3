from __future__ import annotations

from typing import Optional
import threading

import typer

from .codec import import_file, write_export
from .config import AppConfig
from .errors import QuoteError, SyncError
from .models import ALL_CATEGORIES, Quote
from .preferences import FilterPreference, LastViewedQuote
from .quote_store import QuoteStore
from .selector import RandomSelector
from .sources import RemoteQuoteSource
from .storage import JsonFileStore, MemoryStore
from .sync import SyncEngine, SyncResult, SyncStatus


app = typer.Typer(help="Quote generator: browse, edit, import/export and sync quotes")


def _load_components() -> tuple[AppConfig, QuoteStore, FilterPreference, RemoteQuoteSource]:
	config = AppConfig.load()
	storage = JsonFileStore(config.store_path)
	store = QuoteStore(storage)
	prefs = FilterPreference(storage)
	source = RemoteQuoteSource(config.remote_url, timeout_seconds=config.timeout_s)
	return config, store, prefs, source


def _fail(exc: Exception) -> None:
	print(f"[error] {exc}")
	raise typer.Exit(code=1)


def _print_quote(quote: Quote) -> None:
	print(f'"{quote.text}"')
	print(f"Category: {quote.category}")


def _print_sync_status(result: SyncResult) -> None:
	if result.status == SyncStatus.SYNCING:
		print("[sync] Syncing with server...")
	elif result.status == SyncStatus.SUCCEEDED:
		print(f"[sync] Quotes synced with server ({result.added} new, {result.updated} updated).")
	elif result.status == SyncStatus.SKIPPED:
		print("[skip] Sync already in progress.")
	else:
		print(f"[sync] Sync failed: {result.reason}")


def _resolve_category(store: QuoteStore, prefs: FilterPreference, category: Optional[str]) -> str:
	cats = store.categories()
	if category is None:
		return prefs.restore(cats)
	category = category.strip()
	if category != ALL_CATEGORIES and category not in cats:
		raise typer.BadParameter(f"unknown category {category!r}; choose one of: all, {', '.join(cats)}")
	prefs.save(category)
	return category


@app.command()
def show(
	category: Optional[str] = typer.Option(None, help="Category to draw from (remembered for next time)"),
):
	"""Print a random quote from the selected category."""
	_, store, prefs, _ = _load_components()
	selected = _resolve_category(store, prefs, category)
	quote = RandomSelector().pick(store.list_quotes(selected), selected)
	if quote is None:
		print("No quotes available.")
		return
	_print_quote(quote)


@app.command()
def add(
	text: str = typer.Argument(..., help="Quote text"),
	category: str = typer.Argument(..., help="Quote category"),
	publish: bool = typer.Option(False, "--publish/--no-publish", help="Also post the quote to the remote feed"),
):
	"""Add a quote to the local collection."""
	_, store, _, source = _load_components()
	try:
		quote = store.add(text, category)
	except QuoteError as e:
		_fail(e)
	print("New quote added successfully!")
	if publish:
		try:
			source.post(quote)
			print("[sync] Published to server.")
		except SyncError as e:
			print(f"[error] {e}")


@app.command("list")
def list_cmd(
	category: Optional[str] = typer.Option(None, help="Only quotes in this category"),
):
	"""List stored quotes, filtered by category."""
	_, store, prefs, _ = _load_components()
	selected = _resolve_category(store, prefs, category)
	quotes = store.list_quotes(selected)
	if not quotes:
		print("No quotes available.")
		return
	for q in quotes:
		print(f'[{q.category}] "{q.text}"')


@app.command()
def categories():
	"""List known categories."""
	_, store, prefs, _ = _load_components()
	cats = store.categories()
	current = prefs.restore(cats)
	for name in [ALL_CATEGORIES] + cats:
		marker = "*" if name == current else " "
		print(f"{marker} {name}")


@app.command("filter")
def filter_cmd(
	category: str = typer.Argument(..., help="Category to remember, or 'all'"),
):
	"""Remember a category filter for later commands."""
	_, store, prefs, _ = _load_components()
	selected = _resolve_category(store, prefs, category)
	print(f"Filter set to: {selected}")


@app.command()
def export(
	out: Optional[str] = typer.Option(None, help="Directory to write quotes.json into"),
):
	"""Export all quotes to quotes.json."""
	config, store, _, _ = _load_components()
	path = write_export(store.quotes, out or config.export_dir)
	print(f"Exported {store.count()} quotes to {path}")


@app.command("import")
def import_cmd(
	path: str = typer.Argument(..., help="JSON file with an array of {text, category}"),
):
	"""Import quotes from a JSON file."""
	_, store, _, _ = _load_components()
	try:
		summary = import_file(store, path)
	except (QuoteError, OSError) as e:
		_fail(e)
	print(f"Quotes imported successfully! ({summary.imported} added, {summary.skipped} skipped)")


@app.command()
def sync():
	"""Run one sync cycle against the remote feed."""
	config, store, _, source = _load_components()
	engine = SyncEngine(store, source.fetch, on_status=_print_sync_status, limit=config.sync_limit)
	result = engine.sync_once()
	if not result.ok:
		raise typer.Exit(code=1)


@app.command()
def watch(
	interval: Optional[float] = typer.Option(None, help="Seconds between sync cycles"),
	cycles: int = typer.Option(0, help="Stop after this many cycles (0 = until interrupted)"),
):
	"""Sync now and then keep syncing on a fixed period."""
	config, store, _, source = _load_components()
	period = interval if interval is not None else config.sync_interval_s
	if period <= 0:
		raise typer.BadParameter("interval must be positive")
	done = threading.Event()
	finished = [0]

	def on_status(result: SyncResult) -> None:
		_print_sync_status(result)
		if result.status == SyncStatus.SYNCING:
			return
		finished[0] += 1
		if cycles and finished[0] >= cycles:
			done.set()

	engine = SyncEngine(store, source.fetch, on_status=on_status, limit=config.sync_limit)
	engine.sync_once()
	if done.is_set():
		return
	handle = engine.schedule_recurring(period)
	try:
		while not done.wait(0.5):
			pass
	except KeyboardInterrupt:
		print("[sync] Stopped.")
	finally:
		handle.stop()


SHELL_HELP = """Commands:
  next                 show a random quote
  last                 show the last quote viewed this session
  add TEXT | CATEGORY  add a quote
  filter CATEGORY      change the category filter (or 'all')
  categories           list categories
  sync                 sync with the server now
  export               write quotes.json
  quit                 leave"""


@app.command()
def shell(
	auto_sync: bool = typer.Option(True, "--auto-sync/--no-auto-sync", help="Sync in the background while the shell is open"),
):
	"""Interactive session: browse, add, filter and sync quotes."""
	config, store, prefs, source = _load_components()
	if auto_sync and config.sync_interval_s <= 0:
		raise typer.BadParameter("QUOTES_SYNC_INTERVAL_S must be positive")
	session = LastViewedQuote(MemoryStore())
	selector = RandomSelector()
	engine = SyncEngine(store, source.fetch, on_status=_print_sync_status, limit=config.sync_limit)
	current = prefs.restore(store.categories())
	handle = engine.schedule_recurring(config.sync_interval_s) if auto_sync else None
	print(f"Filter: {current}. Type 'help' for commands.")
	try:
		while True:
			try:
				line = typer.prompt("quotes", default="", show_default=False)
			except typer.Abort:
				break
			cmd, _, rest = line.strip().partition(" ")
			cmd = cmd.lower()
			rest = rest.strip()
			if cmd in ("quit", "exit"):
				break
			if cmd in ("", "help"):
				print(SHELL_HELP)
			elif cmd == "next":
				# A sync may have relabelled every quote in the filtered category
				if current != ALL_CATEGORIES and current not in store.categories():
					current = ALL_CATEGORIES
					prefs.save(current)
					print(f"Filter reset to: {current}")
				quote = selector.pick(store.list_quotes(current), current)
				if quote is None:
					print("No quotes available.")
				else:
					session.remember(quote)
					_print_quote(quote)
			elif cmd == "last":
				quote = session.recall()
				if quote is None:
					print("Nothing viewed yet.")
				else:
					_print_quote(quote)
			elif cmd == "add":
				text, _, category = rest.partition("|")
				try:
					store.add(text, category)
					print("New quote added successfully!")
				except QuoteError as e:
					print(f"[error] {e}")
			elif cmd == "filter":
				wanted = rest or ALL_CATEGORIES
				if wanted != ALL_CATEGORIES and wanted not in store.categories():
					print(f"[error] Unknown category: {wanted}")
				else:
					current = wanted
					prefs.save(current)
					print(f"Filter set to: {current}")
			elif cmd == "categories":
				print(", ".join([ALL_CATEGORIES] + store.categories()))
			elif cmd == "sync":
				engine.sync_once()
			elif cmd == "export":
				path = write_export(store.quotes, config.export_dir)
				print(f"Exported {store.count()} quotes to {path}")
			else:
				print(f"[error] Unknown command: {cmd}")
	finally:
		if handle is not None:
			handle.stop()


@app.command()
def health():
	"""Check configuration and the local store."""
	config, store, prefs, _ = _load_components()
	cats = store.categories()
	print(f"store: {config.store_path} ({store.count()} quotes)")
	print(f"categories: {', '.join(cats) if cats else '-'}")
	print(f"filter: {prefs.restore(cats)}")
	print(f"remote: {config.remote_url} (every {config.sync_interval_s:g}s, first {config.sync_limit} records)")


def run():
	app()


if __name__ == "__main__":
	run()
