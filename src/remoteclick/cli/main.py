"""Main CLI application entry point."""

import asyncio
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from remoteclick import __version__
from remoteclick.cli.output import OutputFormatter
from remoteclick.core.engine import InteractionEngine
from remoteclick.core.protocols import Outcome
from remoteclick.utils.config import AppConfig, ConfigLoader
from remoteclick.utils.exceptions import ConfigurationError, FailureKind

console = Console()

app = typer.Typer(
    name="remoteclick",
    help="Drive a headless browser to click one element on a web page.",
    no_args_is_help=True,
)

EXIT_FAILURE = 1
EXIT_VALIDATION = 2
EXIT_CONFIG = 4


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"remoteclick v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """remoteclick - click a button on a web page from anywhere."""
    pass


def _load_config(
    headless: bool | None = None,
    artifacts_dir: Path | None = None,
    verbose: bool = False,
) -> AppConfig:
    """Load configuration, apply CLI overrides and set up logging."""
    try:
        config = ConfigLoader.load()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(code=EXIT_CONFIG)
    if headless is not None:
        config.headless = headless
    if artifacts_dir:
        config.artifacts_dir = artifacts_dir
    level = config.log_level if verbose else "WARNING"
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


def _exit_code(outcome: Outcome) -> int:
    if outcome.success:
        return 0
    if outcome.kind is FailureKind.VALIDATION:
        return EXIT_VALIDATION
    return EXIT_FAILURE


@app.command()
def run(
    url: str | None = typer.Argument(None, help="Page to open."),
    button_id: str | None = typer.Option(
        None, "--button-id", "-b", help="Id of the element to click"
    ),
    selector: str | None = typer.Option(
        None, "--selector", "-s", help="CSS selector (wins over --button-id)"
    ),
    frame_url_contains: str | None = typer.Option(
        None,
        "--frame-url-contains",
        "-f",
        help="Click inside the first frame whose URL contains this text",
    ),
    wait_ms: int | None = typer.Option(
        None, "--wait-ms", help="Delay after the click before reporting (ms)"
    ),
    wait_for_selector_ms: int | None = typer.Option(
        None, "--wait-for-selector-ms", help="How long to wait for the element (ms)"
    ),
    extra_wait_ms: int | None = typer.Option(
        None, "--extra-wait-ms", help="Delay right after the page loads (ms)"
    ),
    js_click: bool = typer.Option(
        False, "--js-click", help="Use element.click() instead of a mouse click"
    ),
    headless: bool | None = typer.Option(
        None, "--headless/--headed", help="Override REMOTECLICK_HEADLESS"
    ),
    artifacts_dir: Path | None = typer.Option(
        None, "--artifacts-dir", "-o", help="Directory for run records"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON outcome"),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Log pipeline progress to stderr"
    ),
) -> None:
    """Open a page and click one element on it."""
    config = _load_config(headless, artifacts_dir, verbose)
    request: dict[str, Any] = {
        "url": url,
        "buttonId": button_id,
        "selector": selector,
        "frameUrlContains": frame_url_contains,
        "waitMs": wait_ms,
        "waitForSelectorMs": wait_for_selector_ms,
        "extraWaitAfterLoadMs": extra_wait_ms,
        "useJsClick": js_click,
    }

    outcome = asyncio.run(InteractionEngine(config).invoke(request))

    OutputFormatter(console, as_json=as_json).show_outcome(outcome, "CLICK SUCCEEDED")
    raise typer.Exit(code=_exit_code(outcome))


@app.command()
def info(
    url: str | None = typer.Argument(None, help="Page to open."),
    headless: bool | None = typer.Option(
        None, "--headless/--headed", help="Override REMOTECLICK_HEADLESS"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON outcome"),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Log pipeline progress to stderr"
    ),
) -> None:
    """Open a page and report its final URL, HTTP status and title."""
    config = _load_config(headless, verbose=verbose)

    outcome = asyncio.run(InteractionEngine(config).probe(url))

    OutputFormatter(console, as_json=as_json).show_outcome(outcome, "PAGE REACHED")
    raise typer.Exit(code=_exit_code(outcome))


@app.command()
def health(
    as_json: bool = typer.Option(False, "--json", help="Print the JSON report"),
) -> None:
    """Check that a browser executable can be found (nothing is launched)."""
    config = _load_config()

    report = asyncio.run(InteractionEngine(config).liveness())

    OutputFormatter(console, as_json=as_json).show_health(report)
    raise typer.Exit(code=0 if report.ok else EXIT_FAILURE)


@app.command()
def serve(
    host: str | None = typer.Option(
        None, "--host", help="Bind address (default REMOTECLICK_HOST)"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Bind port (default REMOTECLICK_PORT)"
    ),
) -> None:
    """Run the HTTP service (/run, /info, /health)."""
    from remoteclick.server.app import run as run_server

    config = _load_config(verbose=True)
    if host:
        config.host = host
    if port is not None:
        config.port = port

    console.print(f"[dim]Serving on http://{config.host}:{config.port}[/dim]")
    run_server(config)


if __name__ == "__main__":
    app()
