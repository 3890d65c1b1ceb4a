"""UI module for prompt-refiner using Rich for terminal output."""

from contextlib import contextmanager
from typing import ContextManager, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text


class UI:
    """Handles all terminal UI output using Rich."""

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        """Initialize UI with Rich consoles for results and errors."""
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    def show_config(self, provider: str, target: str, timeout_ms: int) -> None:
        """Display configuration information.

        Args:
            provider: Provider name (webhook or daemon)
            target: Webhook URL or socket path
            timeout_ms: Request timeout
        """
        provider_info = Panel(
            f"[bold]Provider:[/bold] [cyan]{provider}[/cyan]\n"
            f"[bold]Target:[/bold] [cyan]{target}[/cyan]\n"
            f"[bold]Timeout:[/bold] [cyan]{timeout_ms}ms[/cyan]",
            title="[bold]Configuration[/bold]",
            box=box.ROUNDED
        )
        self.error_console.print(provider_info)

    @contextmanager
    def show_progress(self, message: str) -> ContextManager[Progress]:
        """Display a progress spinner with a message.

        Args:
            message: The message to display while processing

        Yields:
            Progress: A Rich Progress instance
        """
        with Progress(
            SpinnerColumn(),
            TextColumn(f"[bold cyan]{message}[/bold cyan]"),
            console=self.error_console,
            transient=True
        ) as progress:
            task = progress.add_task(message, total=None)
            yield progress
            progress.update(task, completed=True)

    def show_result(self, refined: str, plain: bool = False) -> None:
        """Display the refined prompt.

        Args:
            refined: The refined prompt
            plain: Print the bare text with no panel
        """
        if plain:
            self.console.print(refined, markup=False, highlight=False, soft_wrap=True)
            return

        improved_panel = Panel(
            Text(refined, style="green"),
            title="[bold green]✨ Refined Prompt[/bold green]",
            border_style="green",
            box=box.ROUNDED
        )
        self.console.print(improved_panel)

    def show_refinement_error(self, error: str, code: Optional[str] = None) -> None:
        """Display refinement error in a styled panel.

        Args:
            error: The error message to display
            code: Optional error kind to include
        """
        error_msg = f"[bold red]Error:[/bold red] {escape(error)}"
        if code:
            error_msg += f"\n[bold]Code:[/bold] {code}"

        error_panel = Panel(
            error_msg,
            title="[red]Refinement Error[/red]",
            border_style="red",
            box=box.ROUNDED
        )
        self.error_console.print(error_panel)

    def show_daemon_started(self, socket_path: str) -> None:
        self.error_console.print(f"[green]✓[/green] Daemon listening on [bold cyan]{escape(socket_path)}[/bold cyan]")
