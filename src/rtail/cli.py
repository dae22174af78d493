"""CLI implementation for rtail."""

import asyncio
import logging
from typing import Optional

import typer

from . import __version__, tail, tail_sync
from .core.config import ClientConfig, DEFAULT_USER_AGENT
from .core.model import TailError
from .core.sizespec import parse_byte_size

app = typer.Typer(add_completion=False, help="Output the last part of a remote file, optionally following it.")


def _version_callback(value: bool):
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def main(
    url: str = typer.Argument(..., help="URL (or local path) of the resource to tail"),
    size: str = typer.Option("1K", "-c", "--bytes", help="Output the last N bytes; use +N to output starting with byte N"),
    follow: bool = typer.Option(False, "-f", "--follow", help="Output appended data as the remote file grows"),
    sleep_interval: int = typer.Option(5, "-s", "--sleep-interval", min=1, help="With --follow, check for appended data every N seconds"),
    output: str = typer.Option("-", "-o", "--output", help="Append output to PATH instead of stdout"),
    user: Optional[str] = typer.Option(None, "-u", "--user", envvar="RTAIL_USER", help="Username for basic authentication"),
    password: Optional[str] = typer.Option(None, "-p", "--password", envvar="RTAIL_PASSWORD", help="Password for basic authentication"),
    user_agent: str = typer.Option(DEFAULT_USER_AGENT, "--user-agent", help="User-Agent to send"),
    insecure: bool = typer.Option(False, "-k", "--insecure", help="Skip TLS certificate verification"),
    connect_timeout: float = typer.Option(30.0, "--connect-timeout", min=0.1, help="Connection timeout in seconds"),
    read_timeout: float = typer.Option(60.0, "--read-timeout", min=0.1, help="Read timeout in seconds"),
    dump_headers: bool = typer.Option(False, "--dump-headers", help="Dump request/response headers to stderr"),
    sync: bool = typer.Option(False, "--sync", help="Force synchronous I/O"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log each request to stderr"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="Print version and quit"),
):
    """Output the tail of URL; with --follow keep printing what gets appended."""
    _setup_logging(verbose)

    if not output:
        typer.echo("Invalid --output option; must have an argument", err=True)
        raise typer.Exit(code=1)

    try:
        spec = parse_byte_size(size)
    except TailError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    config = ClientConfig(
        user=user,
        password=password,
        user_agent=user_agent or None,
        verify=not insecure,
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        dump_headers=dump_headers,
    )
    interval = sleep_interval if follow else None

    try:
        if sync:
            tail_sync(url, size=spec, output=output, config=config, interval=interval)
        else:
            asyncio.run(tail(url, size=spec, output=output, config=config, interval=interval))
    except TailError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        # the usual way a follow run ends; a one-shot fetch cut short is a failure
        raise typer.Exit(code=0 if follow else 130)


if __name__ == "__main__":
    app()
