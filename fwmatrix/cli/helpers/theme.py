"""Unified theme for consistent Rich styling across CLI commands."""

from rich.console import Console
from rich.table import Table
from rich.theme import Theme


class Colors:
    """Standardized color palette for CLI output."""

    # Status colors
    SUCCESS = "bold green"
    ERROR = "bold red"
    WARNING = "bold yellow"
    INFO = "bold blue"

    # UI element colors
    PRIMARY = "cyan"
    SECONDARY = "blue"
    ACCENT = "magenta"
    MUTED = "dim"

    # Text colors
    HEADER = "bold cyan"
    NORMAL = "white"


class Icons:
    """Standardized icons for different message types."""

    SUCCESS = "✅"
    ERROR = "❌"
    BUILD = "🔨"
    CONFIG = "⚙️"

    _TEXT_FALLBACKS = {
        "SUCCESS": "[OK]",
        "ERROR": "[ERROR]",
        "BUILD": "",
        "CONFIG": "",
    }

    @classmethod
    def get_icon(cls, icon_name: str, icon_mode: str = "emoji") -> str:
        """Get icon based on the specified mode.

        Args:
            icon_name: Name of the icon (e.g., "SUCCESS", "ERROR")
            icon_mode: Icon mode - "emoji" or "text"

        Returns:
            The appropriate icon based on mode
        """
        if icon_mode == "emoji":
            return getattr(cls, icon_name, "")
        return cls._TEXT_FALLBACKS.get(icon_name, f"[{icon_name}]")

    @classmethod
    def format_with_icon(
        cls, icon_name: str, text: str, icon_mode: str = "emoji"
    ) -> str:
        """Format text with icon, handling empty icons gracefully."""
        icon = cls.get_icon(icon_name, icon_mode)
        if icon:
            return f"{icon} {text}"
        return text


FWMATRIX_THEME = Theme(
    {
        "success": Colors.SUCCESS,
        "error": Colors.ERROR,
        "warning": Colors.WARNING,
        "info": Colors.INFO,
        "primary": Colors.PRIMARY,
        "secondary": Colors.SECONDARY,
        "accent": Colors.ACCENT,
        "muted": Colors.MUTED,
        "header": Colors.HEADER,
    }
)


class ThemedConsole:
    """Console wrapper with the fwmatrix theme applied."""

    def __init__(self, icon_mode: str = "emoji", console: Console | None = None) -> None:
        self.console = console or Console(theme=FWMATRIX_THEME)
        self.icon_mode = icon_mode

    def print_success(self, message: str) -> None:
        self.console.print(
            Icons.format_with_icon("SUCCESS", message, self.icon_mode), style="success"
        )

    def print_error(self, message: str) -> None:
        self.console.print(
            Icons.format_with_icon("ERROR", message, self.icon_mode),
            style="error",
            markup=False,
        )


class TableStyles:
    """Predefined table styling templates."""

    @staticmethod
    def create_basic_table(
        title: str = "", icon: str = "", icon_mode: str = "emoji"
    ) -> Table:
        """Create a basic styled table.

        Args:
            title: Table title
            icon: Icon name to include in title
            icon_mode: Icon mode - "emoji" or "text"

        Returns:
            Configured Table instance
        """
        full_title = Icons.format_with_icon(icon, title, icon_mode) if icon else title
        return Table(
            title=full_title,
            show_header=True,
            header_style=Colors.HEADER,
            border_style=Colors.SECONDARY,
        )

    @staticmethod
    def create_job_table(axis_names: list[str], icon_mode: str = "emoji") -> Table:
        """Create table for resolved job listings."""
        table = TableStyles.create_basic_table("Build Jobs", "BUILD", icon_mode)
        table.add_column("#", style=Colors.MUTED, justify="right")
        for name in axis_names:
            table.add_column(name, style=Colors.PRIMARY, no_wrap=True)
        table.add_column("Target", style=Colors.ACCENT)
        table.add_column("Features", style=Colors.NORMAL)
        table.add_column("Allow failure", style=Colors.MUTED)
        return table

    @staticmethod
    def create_axis_table(icon_mode: str = "emoji") -> Table:
        """Create table for axis listings."""
        table = TableStyles.create_basic_table("Matrix Axes", "CONFIG", icon_mode)
        table.add_column("Axis", style=Colors.PRIMARY, no_wrap=True)
        table.add_column("Values", style=Colors.NORMAL)
        table.add_column("Count", style=Colors.MUTED, justify="right")
        return table

    @staticmethod
    def create_plan_table(icon_mode: str = "emoji") -> Table:
        """Create table for build invocation plans."""
        table = TableStyles.create_basic_table("Build Plan", "BUILD", icon_mode)
        table.add_column("Job", style=Colors.PRIMARY)
        table.add_column("Toolchain", style=Colors.ACCENT, no_wrap=True)
        table.add_column("Build command", style=Colors.NORMAL)
        return table


def get_themed_console(icon_mode: str = "emoji") -> ThemedConsole:
    """Get a themed console instance."""
    return ThemedConsole(icon_mode=icon_mode)
