"""
view_flame.py

Render a flame tree as a collapsible tree in your terminal
using Rich, with human-friendly time units.
"""

from rich.markup import escape
from rich.tree import Tree

from pg_flame.flame import COLOR_INIT, Flame


def format_time(ms: float) -> str:
    """Convert milliseconds to a human-friendly string."""
    if ms >= 1_000:
        return f"{ms / 1_000:.2f}s"
    elif ms >= 1:
        return f"{ms:.2f}ms"
    else:
        return f"{ms * 1_000:.0f}μs"


def _label(flame: Flame, total: float) -> str:
    pct = flame.value / total * 100 if total else 0.0
    human = format_time(flame.value)
    label = f"[bold]{escape(flame.name)}[/] • {human} ({pct:.1f}%)"
    if flame.init_plan:
        label = f"[{COLOR_INIT}]{label} [italic]InitPlan[/][/]"
    return label


def render(flame: Flame, tree: Tree, total: float):
    # Children keep plan order, unlike folded stacks which sort by time
    for child in flame.children:
        branch = tree.add(_label(child, total))
        render(child, branch, total)


def build_console_tree(flame: Flame) -> Tree:
    """Return a rich Tree rooted at `flame`."""
    tree = Tree(_label(flame, flame.value))
    render(flame, tree, flame.value)
    return tree

