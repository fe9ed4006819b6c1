"""Click CLI for running the sample bot."""

from __future__ import annotations

import json
import logging

import click
import uvicorn

from mpbot.config import ConfigError, ensure_configured, load_config_from_env
from mpbot.server.app import configure_logging, create_app


@click.group()
@click.option(
    "--config", "config_path", default=None,
    help="Path to the JSON config file (default: $MPBOT_CONFIG or config.json).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """MessengerPeople sample bot."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config_from_env(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("check-config")
@click.pass_context
def check_config(ctx: click.Context) -> None:
    """Validate the configuration and print the non-secret settings."""
    config = ctx.obj["config"]
    try:
        ensure_configured(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(config.public_view(), indent=2))


@cli.command()
@click.option("--host", default=None, help="Host to listen on (overrides config).")
@click.option("--port", default=None, type=int, help="Port to listen on (overrides config).")
@click.option(
    "--log-level", default="info",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
)
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, log_level: str) -> None:
    """Start the webhook server."""
    config = ctx.obj["config"]
    try:
        ensure_configured(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging(log_level.upper())
    bind_host = host or config.host
    bind_port = port or config.port

    app = create_app(config)
    logging.getLogger(__name__).info(
        "Bot listening for messages on %s:%s", bind_host, bind_port,
    )
    uvicorn.run(app, host=bind_host, port=bind_port, log_config=None, log_level=log_level)
