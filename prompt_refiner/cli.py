"""Command-line interface for prompt-refiner."""

import asyncio
import logging
import sys
from typing import Annotated, Optional

import typer
import yaml

from prompt_refiner.config import load_config, load_daemon_config, load_refiner_config
from prompt_refiner.daemon.server import run_daemon
from prompt_refiner.errors import RefinerError
from prompt_refiner.log import setup_logging
from prompt_refiner.normalize import is_empty
from prompt_refiner.refinement import PromptRefiner, RefineOptions
from prompt_refiner.ui import UI
from prompt_refiner.validation import sanitize_error_message


# Initialize Typer app
app = typer.Typer(
    help="Refine prompts through a webhook workflow, optionally via a caching daemon",
    rich_markup_mode="rich"
)


@app.command()
def refine(
    prompt: Annotated[Optional[str], typer.Argument(help="The prompt to refine (read from stdin if omitted)")] = None,
    url: Annotated[Optional[str], typer.Option("--url", help="Webhook URL")] = None,
    timeout_ms: Annotated[Optional[int], typer.Option("--timeout-ms", help="Request timeout in milliseconds")] = None,
    daemon: Annotated[Optional[bool], typer.Option(
        "--daemon/--no-daemon",
        help="Send the prompt to the local daemon instead of the webhook"
    )] = None,
    socket: Annotated[Optional[str], typer.Option("--socket", help="Daemon socket path")] = None,
    config: Annotated[Optional[str], typer.Option("--config", help="Path to configuration file")] = None,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Show detailed output"
    )] = False,
    plain: Annotated[bool, typer.Option(
        "--plain",
        help="Print only the refined text"
    )] = False
):
    """Refine a single prompt and print the result."""
    ui = UI()
    setup_logging(logging.DEBUG if verbose else None)

    if prompt is None and not sys.stdin.isatty():
        prompt = sys.stdin.read()

    if is_empty(prompt):
        ui.show_refinement_error("No prompt provided")
        raise typer.Exit(1)

    try:
        refiner = PromptRefiner(config_path=config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        ui.show_refinement_error(f"Error loading configuration: {e}")
        raise typer.Exit(1)

    options = RefineOptions(url=url, timeout_ms=timeout_ms, use_daemon=daemon, socket_path=socket)

    # Show provider info if verbose
    if verbose:
        cli_config = refiner.cli_config(options)
        if cli_config.use_daemon:
            ui.show_config('daemon', cli_config.socket_path, cli_config.timeout_ms)
        else:
            refiner_config = refiner.refiner_config(options)
            ui.show_config('webhook', refiner_config.webhook_url, refiner_config.timeout_ms)

    try:
        with ui.show_progress("Refining prompt..."):
            refined = asyncio.run(refiner.refine(prompt, options))
    except RefinerError as e:
        ui.show_refinement_error(sanitize_error_message(e), e.code.value)
        raise typer.Exit(1)

    ui.show_result(refined, plain=plain)


@app.command()
def daemon(
    socket: Annotated[Optional[str], typer.Option("--socket", help="Socket path to listen on")] = None,
    cache_ttl_ms: Annotated[Optional[int], typer.Option("--cache-ttl-ms", help="Cache entry lifetime in milliseconds")] = None,
    cache_max: Annotated[Optional[int], typer.Option("--cache-max", help="Maximum number of cached results")] = None,
    config: Annotated[Optional[str], typer.Option("--config", help="Path to configuration file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at debug level")] = False
):
    """Run the caching daemon in the foreground until interrupted."""
    ui = UI()
    setup_logging(logging.DEBUG if verbose else logging.INFO)

    try:
        file_data = load_config(config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        ui.show_refinement_error(f"Error loading configuration: {e}")
        raise typer.Exit(1)

    daemon_config = load_daemon_config(
        {'socket_path': socket, 'cache_ttl_ms': cache_ttl_ms, 'cache_max_entries': cache_max},
        file_data=file_data
    )
    refiner_config = load_refiner_config(file_data=file_data)

    ui.show_daemon_started(daemon_config.socket_path)
    run_daemon(daemon_config, refiner_config)


if __name__ == "__main__":
    app()
