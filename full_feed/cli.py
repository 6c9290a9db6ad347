"""
Command-line interface for the full-feed proxy.

Uses Typer to provide a `serve` command running the HTTP proxy and an
`enrich` command that enriches a single feed and prints the result.
Supports loading .env files for configuration overrides.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv
import httpx
from rich.console import Console
import typer
import uvicorn

from .cache import CacheActor
from .config import AppConfig, load_config
from .enrich import qualify_feed
from .errors import FeedFetchError, FeedParseError
from .fetch import ArticleFetcher
from .logging_utils import setup_logging
from .server import create_app

app = typer.Typer(add_completion=False)
console = Console(stderr=True)


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind the server to."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Run the feed proxy.

    Requests to /<base64 feed url> return the feed with every item body
    replaced by the full text of the linked article.
    """
    cfg = _load(config, log_level)
    if host:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port
    setup_logging(cfg.logging)

    uvicorn.run(
        create_app(cfg),
        host=cfg.server.host,
        port=cfg.server.port,
        log_config=None,
    )


@app.command()
def enrich(
    url: str = typer.Argument(..., help="Feed URL to enrich."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write RSS here instead of stdout."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Enrich one feed and print it as RSS."""
    cfg = _load(config, log_level)
    setup_logging(cfg.logging)

    try:
        body = asyncio.run(_enrich_once(url, cfg))
    except (FeedFetchError, FeedParseError) as exc:
        console.print(f"[red]Could not qualify RSS:[/red] {exc}")
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(body)
    else:
        output.write_text(body, encoding="utf-8")
        console.print(f"Feed written: {output}")


async def _enrich_once(url: str, cfg: AppConfig) -> str:
    async with httpx.AsyncClient(trust_env=cfg.fetch.trust_env) as client:
        fetcher = ArticleFetcher(client, cfg.fetch, cfg.extract)
        actor = CacheActor(fetcher, cfg.cache)
        actor.start()
        try:
            return await qualify_feed(url, client, actor.handle(), fetcher, cfg)
        finally:
            actor.close()
            await actor.wait_closed()


if __name__ == "__main__":
    app()
