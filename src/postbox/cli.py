"""CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from postbox.core.broker import Broker
from postbox.core.config import Settings, get_settings
from postbox.core.exceptions import PostboxError
from postbox.models.message import Message
from postbox.participants import Producer
from postbox.protocols.delay import DelayMode
from postbox.protocols.persistence import PersistenceMode

app = typer.Typer(
    name="postbox",
    help="In-process asynchronous message broker",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _settings(**overrides: object) -> Settings:
    return get_settings(**{k: v for k, v in overrides.items() if v is not None})


def _format_ts(ts: float | None) -> str:
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts, UTC).strftime("%Y-%m-%d %H:%M:%S")


@app.command()
def version() -> None:
    """Show version."""
    from postbox import __version__

    console.print(f"postbox {__version__}")


@app.command()
def demo(
    messages: int = typer.Option(4, "--messages", "-n", min=1, help="Messages per producer"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1),
    delay_mode: Optional[DelayMode] = typer.Option(None, "--delay-mode"),
    delay: Optional[float] = typer.Option(None, "--delay", min=0.0, help="Delay for constant mode"),
    min_delay: Optional[float] = typer.Option(None, "--min-delay", min=0.0),
    max_delay: Optional[float] = typer.Option(None, "--max-delay", min=0.0),
    persistence: Optional[PersistenceMode] = typer.Option(None, "--persistence"),
    path: Optional[Path] = typer.Option(None, "--path", help="Store for file persistence"),
) -> None:
    """Run two producers through a broker and report each delivery."""
    settings = _settings(
        worker_count=workers,
        delay_mode=delay_mode,
        delay_seconds=delay,
        delay_min=min_delay,
        delay_max=max_delay,
        persistence_mode=persistence,
        persistence_path=path,
    )
    _configure_logging(settings)

    async def run() -> None:
        broker = Broker.from_settings(settings)
        alice = Producer("alice", broker)
        bob = Producer("bob", broker)

        async with broker:
            for n in range(1, messages + 1):
                for sender, recipient in ((alice, "bob"), (bob, "alice")):
                    message = await sender.send(f"message {n} from {sender.participant_id}", recipient)
                    console.print(f"[cyan]published[/cyan] {message.id} {sender.participant_id} -> {recipient}")
            await broker.join()

        for producer in (alice, bob):
            for message, delay in producer.confirmations:
                console.print(
                    f"[green]delivered[/green] {message.id} to {message.recipient} "
                    f"after {delay:.2f}s: {message.content}"
                )

        stats = broker.stats
        console.print(
            f"[bold]{stats.delivered}/{stats.published} delivered[/bold], "
            f"{stats.persist_errors} persistence errors, {stats.notify_errors} observer errors"
        )

    try:
        asyncio.run(run())
    except PostboxError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


@app.command()
def history(
    persistence: Optional[PersistenceMode] = typer.Option(None, "--persistence"),
    path: Optional[Path] = typer.Option(None, "--path", help="Store for file persistence"),
    database_url: Optional[str] = typer.Option(None, "--database-url"),
) -> None:
    """Show every stored message."""
    from postbox.persistence.factory import create_persistence

    settings = _settings(persistence_mode=persistence, persistence_path=path, database_url=database_url)
    _configure_logging(settings)

    async def load() -> list[Message]:
        store = create_persistence(
            settings.persistence_mode, path=settings.persistence_path, url=settings.database_url
        )
        await store.initialize()
        try:
            return await store.load_all()
        finally:
            await store.close()

    try:
        stored = asyncio.run(load())
    except PostboxError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    table = Table(title=f"{len(stored)} stored messages")
    table.add_column("ID", style="dim")
    table.add_column("Sender")
    table.add_column("Recipient")
    table.add_column("Content")
    table.add_column("Sent")
    table.add_column("Delivered")

    for message in sorted(stored, key=lambda m: m.timestamp_sent):
        table.add_row(
            message.id,
            message.sender,
            message.recipient,
            message.content,
            _format_ts(message.timestamp_sent),
            _format_ts(message.timestamp_delivered),
        )

    console.print(table)


if __name__ == "__main__":
    app()
