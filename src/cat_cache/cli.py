"""Command-line entry point for cat_cache.

``cat-cache serve`` runs the proxy under uvicorn; ``cat-cache stats`` prints
what is currently in a cache directory. Command-line options override the
environment-derived settings.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from cat_cache.api.app import create_app
from cat_cache.config import Settings, configure_logging
from cat_cache.dto import StoreStats
from cat_cache.repositories import FileBlobRepository

app = typer.Typer(
    name="cat-cache",
    help="Read-through cache proxy for http.cat images.",
    no_args_is_help=True,
    add_completion=False,
)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Server host."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Server port."),
    cache: Optional[Path] = typer.Option(None, "--cache", "-c", help="Cache directory."),
    backend: Optional[str] = typer.Option(None, "--backend", help="Storage backend: file or redis."),
    upstream: Optional[str] = typer.Option(None, "--upstream", help="Upstream base URL."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level."),
) -> None:
    """Run the proxy server."""
    try:
        settings = Settings.from_env().with_overrides(
            api_host=host,
            api_port=port,
            cache_dir=cache,
            storage_backend=backend.lower() if backend else None,
            upstream_base_url=upstream,
            log_level=log_level.upper() if log_level else None,
        )
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)

    configure_logging(settings.log_level)

    if settings.storage_backend == "file":
        try:
            settings.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            typer.echo(f"Cannot create cache dir: {e}", err=True)
            raise typer.Exit(code=1)

    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


@app.command()
def stats(
    cache: Optional[Path] = typer.Option(None, "--cache", "-c", help="Cache directory."),
) -> None:
    """Print statistics for a file cache directory as JSON."""
    settings = Settings.from_env().with_overrides(cache_dir=cache)
    if not settings.cache_dir.is_dir():
        typer.echo(f"Cache directory does not exist: {settings.cache_dir}", err=True)
        raise typer.Exit(code=1)

    repository = FileBlobRepository.create(settings)
    store_stats = StoreStats(**asyncio.run(repository.get_stats()))
    typer.echo(store_stats.model_dump_json(indent=2))


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
