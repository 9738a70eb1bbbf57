import json
import logging
import os
from pathlib import Path
from typing import Callable, Optional
from wsgiref.simple_server import make_server

import click
import requests

import hlsplaylist
from hlsplaylist.hls import MediaPlaylist, PlaylistError, parse
from hlsplaylist.hls.playlist import format_seconds

FETCH_TIMEOUT = float(os.getenv("HLSPLAYLIST_FETCH_TIMEOUT", "10"))

_logger = logging.getLogger("hlsplaylist")


def validate_within(
    minval: int, maxval: int
) -> Callable[[click.core.Context, str, int], int]:
    def _validator(ctx: click.core.Context, param: str, value: int) -> int:
        if minval <= value <= maxval:
            return value
        raise click.BadParameter(f"must be within {minval}-{maxval}")

    return _validator


def read_source(source: str) -> str:
    if source.startswith(("http://", "https://")):
        _logger.info("Fetching %s", source)
        try:
            response = requests.get(
                source,
                headers={"user-agent": "hlsplaylist"},
                timeout=FETCH_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as error:
            raise click.ClickException(f"Fetch failed: {error}") from error
        return response.text
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as error:
        raise click.ClickException(f"Read failed: {error}") from error


def load_source(source: str) -> MediaPlaylist:
    text = read_source(source)
    try:
        return parse(text)
    except PlaylistError as error:
        raise click.ClickException(f"{source}: {error}") from error


@click.group("hlsplaylist", invoke_without_command=True)
@click.pass_context
@click.version_option(hlsplaylist.__version__)
@click.option("--host", help="Bind host", default="127.0.0.1", show_default=True)
@click.option(
    "-p",
    "--port",
    help="Bind port",
    default=8000,
    show_default=True,
    callback=validate_within(0, 65535),
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
def main(ctx: click.core.Context, host: str, port: int, verbose: int) -> None:
    """Parse HLS media playlists."""

    level = logging.WARNING - 10 * min(verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if ctx.invoked_subcommand is not None:
        return

    from hlsplaylist.app import app

    try:
        httpd = make_server(host, port, app)
    except OSError as error:
        raise click.ClickException(f"Bind failed: {error}") from error
    bind_host, bind_port = httpd.server_address[:2]
    click.echo(f"Running on http://{bind_host}:{bind_port}/")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        _logger.info("Shutting down")
    finally:
        httpd.server_close()


@main.command("inspect")
@click.argument("source")
@click.option("--json", "as_json", is_flag=True, help="Print the playlist as JSON")
def inspect(source: str, as_json: bool) -> None:
    """Print a summary of a playlist file or URL."""
    playlist = load_source(source)
    if as_json:
        click.echo(json.dumps(playlist.to_dict(), indent=2))
        return
    version = "unspecified" if playlist.version is None else playlist.version
    click.echo(f"Target duration: {playlist.target_duration}s")
    click.echo(f"Version: {version}")
    click.echo(f"Ended: {'yes' if playlist.ended else 'no'}")
    click.echo(f"Segments: {len(playlist.segments)}")
    click.echo(f"Total duration: {format_seconds(playlist.total_duration)}s")
    for index, run in enumerate(playlist.discontinuities, start=1):
        click.echo(
            f"Run {index}: {len(run.segments)} segment(s), "
            f"{format_seconds(run.total_duration)}s"
        )


@main.command("check")
@click.argument("source")
def check(source: str) -> None:
    """Validate a playlist file or URL."""
    load_source(source)
    click.echo("OK")


@main.command("normalize")
@click.argument("source")
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None
)
def normalize(source: str, output: Optional[Path]) -> None:
    """Re-emit a playlist with only the interpreted tags."""
    playlist = load_source(source)
    if output is None:
        click.echo(playlist.dumps(), nl=False)
    else:
        playlist.write(output)
