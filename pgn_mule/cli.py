"""
Command-line interface for pgn-mule.

Usage:
    pgn-mule serve          # Run the relay HTTP server and pollers
    pgn-mule health         # Check Redis connectivity
    pgn-mule list-sources   # Print the persisted sources
    pgn-mule command TEXT   # Run one operator text command
    pgn-mule version
"""

import asyncio
import sys

import click

from pgn_mule import __version__
from pgn_mule.config.settings import get_settings
from pgn_mule.observability.logging import get_logger, setup_logging
from pgn_mule.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """pgn-mule - Delayed PGN relay for chess broadcasts."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics/--no-metrics", default=True, help="Enable metrics server")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(
    host: str | None,
    port: int | None,
    reload: bool,
    metrics: bool,
    metrics_port: int | None,
) -> None:
    """Start the relay server. Persisted sources resume polling on startup."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    if metrics:
        metrics_port = metrics_port or settings.metrics_port
        get_metrics().start_server(port=metrics_port)
        click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")

    click.echo(f"Starting relay on {host}:{port}")
    click.echo(f"Feeds exposed under {settings.public_base_url}/")

    uvicorn.run(
        "pgn_mule.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command()
def health() -> None:
    """Check health of the persistence store."""
    logger = get_logger("pgn_mule.cli")

    async def check():
        from pgn_mule.storage.store import KeyValueStore

        settings = get_settings()
        results: dict[str, bool] = {}

        try:
            store = KeyValueStore()
            await store.connect()
            results["redis"] = await store.health_check()
            await store.close()
        except Exception as e:
            results["redis"] = False
            logger.error("Redis health check failed", error=str(e))

        results["zulip_configured"] = settings.zulip_configured

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)
        for name, status in results.items():
            icon = "✓" if status else "✗"
            color = "green" if status else "red"
            click.echo(click.style(f"  {icon} {name}: {status}", fg=color))
        click.echo("-" * 40)

        if results["redis"]:
            click.echo(click.style("Relay store healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Relay store unreachable!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


@main.command("list-sources")
def list_sources() -> None:
    """Print every persisted source with its exposed URL."""

    async def run():
        from pgn_mule.services.formatting import exposed_url
        from pgn_mule.sources.repository import SourceRepository
        from pgn_mule.storage.store import KeyValueStore

        settings = get_settings()
        async with KeyValueStore() as store:
            sources = await SourceRepository(store).list_all()

        if not sources:
            click.echo("No active sources")
            return

        for source in sources:
            click.echo(
                f"{source.name}  {exposed_url(settings, source.name)}  "
                f"every {source.update_freq_seconds}s, delay {source.delay_seconds}s  "
                f"<- {source.url}"
            )

    asyncio.run(run())


@main.command()
@click.argument("text", nargs=-1, required=True)
def command(text: tuple[str, ...]) -> None:
    """Run one operator command, e.g. `pgn-mule command list`.

    Sources created here are persisted without polling. A running `serve`
    starts polling them on restart; use POST /admin/command on the live
    server to have them polled right away.
    """

    async def run():
        from pgn_mule.admin.commands import SOURCE_COMMANDS, CommandHandler
        from pgn_mule.api.dependencies import cleanup_dependencies, get_relay_service

        line = " ".join(text)
        service = await get_relay_service()
        service.arm_polling = False
        try:
            reply = await CommandHandler(service).handle(line)
        finally:
            await cleanup_dependencies()

        if reply is None:
            click.echo(click.style("Unknown command", fg="red"))
            sys.exit(1)
        click.echo(reply)
        if line.split()[0].lower() in SOURCE_COMMANDS:
            click.echo(
                f"Saved only. POST /admin/command on the running server "
                f"({get_settings().public_base_url}) to start polling now."
            )

    asyncio.run(run())


@main.command()
def version() -> None:
    """Print the relay version."""
    click.echo(f"Version: {__version__}")


if __name__ == "__main__":
    main()
