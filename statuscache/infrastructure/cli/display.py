from typing import Any, Optional

from rich.align import Align
from rich.box import HEAVY, ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from statuscache.domain.interfaces.user_interface import UserInterface
from statuscache.domain.models.common import ServerConfig


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_startup_banner(self, config: ServerConfig) -> None:
        """Displays the server address and cache directory once serving starts.

        Args:
            config: The resolved server configuration.
        """
        table = Table(show_header=False, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Content", style="cyan")
        table.add_row(f"[bold cyan]Server running at {config.base_url}[/bold cyan]")
        table.add_row(f"Cache: [bold]{config.cache_dir}[/bold]")

        self.console.print("")
        self.console.print(Align.center(table))
        self.console.print("")
