"""
Convert a query plan into flame graph data.

Features:
- `build_flame` wraps planning and execution time under a "Total" root
- `convert_node` walks the plan tree, adding init-plan time to the parent
  and painting init-plan subtrees grey
- `node_name` derives a label such as "Index Scan using idx on t"
- `format_detail` renders the node's attributes as an HTML table
"""

import html
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from pg_flame.plan import Node, Plan

COLOR_PLAN = "#00C05A"
COLOR_INIT = "#C0C0C0"

TABLE_HEADER = '<table class="table table-striped table-bordered"><tbody>'
ROW_TEMPLATE = "<tr><th>{}</th><td>{}</td></tr>"
TABLE_FOOTER = "</tbody></table>"
DETAIL_TEMPLATE = "<span>{}</span>"


@dataclass(frozen=True)
class Flame:
    name: str
    value: float
    time: float
    detail: str
    color: Optional[str] = None
    init_plan: bool = False
    children: Tuple["Flame", ...] = field(default_factory=tuple)


def _verbatim(value) -> str:
    return str(value)


def _kilobytes(value) -> str:
    return f"{value}kB"


# (attribute, label, formatter) in display order; a row is shown only when
# the attribute is truthy, so zero counters are omitted as well.
DETAIL_ROWS: List[Tuple[str, str, Callable]] = [
    ("parent_relationship", "Parent Relationship", _verbatim),
    ("filter", "Filter", _verbatim),
    ("join_filter", "Join Filter", _verbatim),
    ("hash_cond", "Hash Cond", _verbatim),
    ("index_cond", "Index Cond", _verbatim),
    ("recheck_cond", "Recheck Cond", _verbatim),
    ("buffers_hit", "Buffers Shared Hit", _verbatim),
    ("buffers_read", "Buffers Shared Read", _verbatim),
    ("hash_buckets", "Hash Buckets", _verbatim),
    ("hash_batches", "Hash Batches", _verbatim),
    ("memory_usage", "Memory Usage", _kilobytes),
]


def build_flame(plan: Plan) -> Flame:
    """Build the flame tree for a parsed plan."""
    return build_tree(plan.execution_tree, plan.planning_time)


def build_tree(root: Node, planning_time: float) -> Flame:
    """
    Return a synthetic "Total" node with two children: a planning-time
    leaf and the converted execution tree.
    """
    planning = Flame(
        name="Query Planning",
        value=planning_time,
        time=planning_time,
        detail=DETAIL_TEMPLATE.format("Time to generate the query plan"),
        color=COLOR_PLAN,
    )
    execution = convert_node(root)

    return Flame(
        name="Total",
        value=planning.value + execution.value,
        time=planning.time + execution.time,
        detail=DETAIL_TEMPLATE.format("Includes planning and execution time"),
        children=(planning, execution),
    )


def convert_node(node: Node, color: Optional[str] = None) -> Flame:
    """
    Convert a plan node and its children into a Flame.

    The planner already counts regular children inside a node's total time,
    but not InitPlan children, so only those are added to `value`.
    """
    init_plan = node.is_init_plan
    if init_plan:
        color = COLOR_INIT

    value = node.total_time
    children = []
    for child in node.children:
        # Pass the color down so a whole InitPlan subtree is grey
        flame = convert_node(child, color)
        if flame.init_plan:
            value += flame.value
        children.append(flame)

    return Flame(
        name=node_name(node),
        value=value,
        time=node.total_time,
        detail=format_detail(node),
        color=color,
        init_plan=init_plan,
        children=tuple(children),
    )


def node_name(node: Node) -> str:
    if node.table and node.index:
        return f"{node.method} using {node.index} on {node.table}"
    if node.table:
        return f"{node.method} on {node.table}"
    # An index without a table shows only the method
    return node.method


def detail_rows(node: Node) -> List[Tuple[str, str]]:
    """Return (label, value) pairs for the attributes set on `node`."""
    rows = []
    for attr, label, fmt in DETAIL_ROWS:
        value = getattr(node, attr, None)
        if value:
            rows.append((label, fmt(value)))
    return rows


def format_detail(node: Node) -> str:
    """Render `detail_rows` as a two-column HTML table."""
    parts = [TABLE_HEADER]
    for label, value in detail_rows(node):
        # The page inserts detail as HTML, and conditions contain < and >
        parts.append(ROW_TEMPLATE.format(html.escape(label), html.escape(value)))
    parts.append(TABLE_FOOTER)
    return "".join(parts)
