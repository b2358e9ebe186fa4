import asyncio
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from clipkeep.clipboard import ClipboardWatcher, MemoryClipboard, PyperclipClipboard
from clipkeep.config import ClipboardSettings, StorageSettings, config_files, get_settings
from clipkeep.errors import ClipkeepError
from clipkeep.history import ClipboardHistory
from clipkeep.logger import setup_logging
from clipkeep.models import Entry
from clipkeep.ports import ClipboardPort
from clipkeep.store import PersistentLog

console = Console(
    record=True,
    width=120,
    color_system="auto",
)

app = typer.Typer(name="clipkeep", help="Clipboard history with favorites.")


class ConsoleNotifier:
    def notify(self, message: str, undo: Optional[Callable[[], None]] = None) -> None:
        console.print(f"[bold green]{message}[/bold green]")


class TyperConfirm:
    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def confirm(self, title: str, message: str, on_confirm: Callable[[], None]) -> None:
        console.print(f"[bold]{title}[/bold]")
        if self.assume_yes or typer.confirm(message, default=False):
            on_confirm()


def open_history(
    clipboard: Optional[ClipboardPort] = None, assume_yes: bool = False
) -> ClipboardHistory:
    storage = get_settings(StorageSettings)
    settings = get_settings(ClipboardSettings)
    setup_logging(storage)
    history = ClipboardHistory(
        settings,
        PersistentLog.from_settings(storage, settings),
        clipboard or MemoryClipboard(),
        notifier=ConsoleNotifier(),
        confirm=TyperConfirm(assume_yes),
    )
    history.start()
    return history


def _require(history: ClipboardHistory, memory_id: int) -> Entry:
    entry = history.get(memory_id)
    if entry is None:
        console.print(f"[bold red]No entry with id {memory_id}.[/bold red]")
        raise typer.Exit(code=1)
    return entry


def _entries_table(title: str, entries: list[Entry], history: ClipboardHistory) -> Table:
    table = Table(title=title)
    table.add_column("id", justify="right")
    table.add_column("disk", justify="right")
    table.add_column("text")
    for entry in entries:
        marker = " *" if entry is history.selected else ""
        table.add_row(
            f"{entry.memory_id}{marker}",
            str(entry.disk_id) if entry.disk_id is not None else "-",
            history.preview(entry),
        )
    return table


@app.command(name="list", help="Show favorites and the newest page of history.")
def list_entries(
    query: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by text."),
):
    history = open_history()
    if query:
        console.print(_entries_table(f"Matches for '{query}'", history.search(query), history))
        return
    console.print(_entries_table("Favorites", history.favorites(), history))
    console.print(_entries_table("History", history.window.visible(), history))


@app.command(name="add", help="Add text to the history as if it had been copied.")
def add(text: str):
    history = open_history()
    entry = history.process_clipboard_content(text)
    if entry is None:
        console.print("[yellow]Nothing added.[/yellow]")
        return
    console.print(f"[bold green]Entry {entry.memory_id}[/bold green] {history.preview(entry)}")


@app.command(name="favorite", help="Toggle the favorite flag of an entry.")
def favorite(memory_id: int):
    history = open_history()
    entry = _require(history, memory_id)
    history.toggle_favorite(entry)
    state = "favorite" if entry.favorite else "not favorite"
    console.print(f"Entry {entry.memory_id} is now {state}.")


@app.command(name="delete", help="Delete an entry.")
def delete(memory_id: int):
    history = open_history()
    history.delete_entry(_require(history, memory_id))
    console.print(f"Deleted entry {memory_id}.")


@app.command(name="copy", help="Put an entry back on the system clipboard.")
def copy(memory_id: int):
    history = open_history(clipboard=PyperclipClipboard())
    history.activate(_require(history, memory_id))
    console.print(f"Copied entry {memory_id}.")


@app.command(name="clear", help="Delete every entry except favorites.")
def clear(yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask.")):
    history = open_history(assume_yes=yes)
    before = len(history.registry)
    history.request_clear()
    console.print(f"Removed {before - len(history.registry)} entries.")


@app.command(name="compact", help="Rewrite the history log from the live entries.")
def compact():
    history = open_history()
    before = history.log.record_count
    history.compact()
    console.print(f"Log compacted from {before} to {history.log.record_count} records.")


@app.command(name="check", help="Verify that memory and disk identities agree.")
def check():
    history = open_history()
    try:
        history.check_consistency()
    except ClipkeepError as e:
        console.print(f"[bold red]Inconsistent:[/bold red] {e}")
        raise typer.Exit(code=1)
    console.print(
        f"[bold green]OK[/bold green] {len(history.registry)} entries, "
        f"{history.log.record_count} log records."
    )


@app.command(name="config", help="Show the effective settings and where they come from.")
def show_config():
    table = Table(title="Settings")
    table.add_column("variable")
    table.add_column("value")
    for settings in (get_settings(ClipboardSettings), get_settings(StorageSettings)):
        for name, field in type(settings).model_fields.items():
            table.add_row(field.alias or name, str(getattr(settings, name)))
    console.print(table)
    for path in config_files():
        state = "[green]found[/green]" if path.is_file() else "[dim]missing[/dim]"
        console.print(f"{path} {state}")


@app.command(name="watch", help="Record clipboard changes until interrupted.")
def watch():
    clipboard = PyperclipClipboard()
    history = open_history(clipboard=clipboard)
    watcher = ClipboardWatcher(history, clipboard, history.settings.poll_interval)
    console.print("[bold blue]Watching the clipboard. Press Ctrl+C to stop.[/bold blue]")
    try:
        asyncio.run(watcher.run())
    except KeyboardInterrupt:
        console.print("[bold]Stopped.[/bold]")


def main():
    try:
        app()
    except ClipkeepError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise


if __name__ == "__main__":
    main()
