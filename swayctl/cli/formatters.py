"""Rich formatters for swayctl CLI output."""

from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..models.tree import Node


# Global console instance
console = Console()


def _label(node: Node) -> str:
    label = f"[bold]{node.type}[/bold]"
    if node.id is not None:
        label += f" [dim]#{node.id}[/dim]"
    if node.name:
        label += f" {escape(node.name)}"
    if node.focused:
        label += " [green](focused)[/green]"
    return label


def format_tree(root: Node) -> Tree:
    """Render the window/workspace tree as a Rich tree."""
    tree = Tree(_label(root))

    def add_children(branch: Tree, node: Node) -> None:
        for child in node.children:
            add_children(branch.add(_label(child)), child)

    add_children(tree, root)
    return tree


def format_window_list(windows: List[Node]) -> Table:
    """Format enumerated windows as a Rich table.

    Args:
        windows: Nodes returned by list_windows

    Returns:
        Rich Table object ready for display
    """
    table = Table(title="Windows", show_header=True, header_style="bold cyan")

    table.add_column("ID", justify="right", style="dim", width=8)
    table.add_column("Type", style="green", width=12)
    table.add_column("App", style="cyan", width=20)
    table.add_column("Title", style="white", width=35)
    table.add_column("PID", justify="right", width=8)
    table.add_column("Status", style="magenta", width=16)

    for window in windows:
        attributes = window.attributes
        app = attributes.get("app_id") or (attributes.get("window_properties") or {}).get("class") or "-"
        title = window.name or ""
        if len(title) > 35:
            title = title[:32] + "..."

        status = []
        if window.focused:
            status.append("focused")
        if window.visible:
            status.append("visible")

        table.add_row(
            str(window.id) if window.id is not None else "-",
            window.type,
            escape(str(app)),
            escape(title),
            str(window.pid) if window.pid is not None else "-",
            ", ".join(status) or "-",
        )

    return table
