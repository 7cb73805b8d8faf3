"""
Command-line interface for feedback-tracker.

Usage:
    feedback-tracker init-db  # Create the feedback tables
    feedback-tracker health   # Check database connectivity
    feedback-tracker serve    # Run the API server
"""

import asyncio
import sys

import click

from src.config.settings import get_settings
from src.observability.logging import setup_logging
from src.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Feedback Tracker - ownership-scoped customer feedback store."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()

    settings = get_settings()
    if settings.tracing_enabled:
        from src.observability.tracing import setup_tracing

        setup_tracing(
            service_name=settings.otel_service_name,
            otlp_endpoint=settings.otel_exporter_otlp_endpoint,
        )


@main.command("init-db")
def init_db() -> None:
    """Create the feedback tables and indexes (idempotent)."""
    from src.feedback.repository import create_feedback_tables
    from src.storage.database import Database

    async def run():
        db = Database()
        await db.connect()
        try:
            await create_feedback_tables(db)
            click.echo("Database initialized successfully")
        finally:
            await db.close()

    asyncio.run(run())


@main.command()
def health() -> None:
    """Check PostgreSQL connectivity."""
    import structlog
    logger = structlog.get_logger()

    async def check() -> bool:
        from src.storage.database import Database

        db = Database()
        try:
            await db.connect()
            return await db.health_check()
        except Exception as e:
            logger.error("Postgres health check failed", error=str(e))
            return False
        finally:
            await db.close()

    healthy = asyncio.run(check())

    click.echo("\nHealth Check Results:")
    click.echo("-" * 40)
    icon = "✓" if healthy else "✗"
    color = "green" if healthy else "red"
    click.echo(click.style(f"  {icon} postgres: {healthy}", fg=color))
    click.echo("-" * 40)

    if healthy:
        click.echo(click.style("All core services healthy!", fg="green"))
        sys.exit(0)
    click.echo(click.style("Some services unhealthy!", fg="red"))
    sys.exit(1)


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(host: str | None, port: int | None, reload: bool, metrics_port: int | None) -> None:
    """Start the feedback API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    metrics_port = metrics_port or settings.metrics_port

    get_metrics().start_server(port=metrics_port)

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
