"""
plan.py

Read PostgreSQL `EXPLAIN (ANALYZE, BUFFERS, FORMAT JSON)` output into a tree
of plan nodes.

Accepted shapes:
- [{"Plan": {...}, "Planning Time": 0.1, ...}]  (what psql prints)
- {"Plan": {...}, "Planning Time": 0.1, ...}
"""

import json
from dataclasses import dataclass, field
from typing import IO, Tuple, Union

INIT_PLAN = "InitPlan"


class PlanError(ValueError):
    """Raised when the input is not usable EXPLAIN JSON."""


@dataclass(frozen=True)
class Node:
    method: str
    table: str = ""
    index: str = ""
    parent_relationship: str = ""
    total_time: float = 0.0
    filter: str = ""
    join_filter: str = ""
    hash_cond: str = ""
    index_cond: str = ""
    recheck_cond: str = ""
    buffers_hit: int = 0
    buffers_read: int = 0
    hash_buckets: int = 0
    hash_batches: int = 0
    memory_usage: int = 0
    children: Tuple["Node", ...] = field(default_factory=tuple)

    @property
    def is_init_plan(self) -> bool:
        return self.parent_relationship == INIT_PLAN


@dataclass(frozen=True)
class Plan:
    planning_time: float
    execution_tree: Node


# Node field -> EXPLAIN JSON key
STRING_KEYS = {
    "table": "Relation Name",
    "index": "Index Name",
    "parent_relationship": "Parent Relationship",
    "filter": "Filter",
    "join_filter": "Join Filter",
    "hash_cond": "Hash Cond",
    "index_cond": "Index Cond",
    "recheck_cond": "Recheck Cond",
}

INT_KEYS = {
    "buffers_hit": "Shared Hit Blocks",
    "buffers_read": "Shared Read Blocks",
    "hash_buckets": "Hash Buckets",
    "hash_batches": "Hash Batches",
    "memory_usage": "Peak Memory Usage",
}


def parse(source: Union[str, bytes, IO[str]]) -> Plan:
    """
    Parse EXPLAIN JSON from a string, bytes or an open file.
    Raises PlanError if the document is not a plan.
    """
    try:
        if hasattr(source, "read"):
            source = source.read()
        doc = json.loads(source)
    except ValueError as exc:
        raise PlanError(f"invalid JSON: {exc}") from exc

    # psql wraps the plan in a one-element list
    if isinstance(doc, list):
        if not doc:
            raise PlanError("empty plan list")
        doc = doc[0]
    if not isinstance(doc, dict) or not isinstance(doc.get("Plan"), dict):
        raise PlanError("no 'Plan' object found")

    return Plan(
        planning_time=_number(doc, "Planning Time", float),
        execution_tree=parse_node(doc["Plan"]),
    )


def parse_node(raw: dict) -> Node:
    """Convert one EXPLAIN JSON plan object (and its `Plans`) to a Node."""
    if not isinstance(raw, dict):
        raise PlanError("plan node is not an object")
    method = raw.get("Node Type")
    if not method:
        raise PlanError("plan node without 'Node Type'")

    plans = raw.get("Plans") or []
    if not isinstance(plans, list):
        raise PlanError("'Plans' is not a list")

    kwargs = {attr: str(raw.get(key) or "") for attr, key in STRING_KEYS.items()}
    kwargs.update({attr: _number(raw, key, int) for attr, key in INT_KEYS.items()})

    return Node(
        method=method,
        total_time=_number(raw, "Actual Total Time", float),
        children=tuple(parse_node(child) for child in plans),
        **kwargs,
    )


def _number(raw: dict, key: str, kind):
    value = raw.get(key)
    if value is None:
        return kind(0)
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise PlanError(f"{key!r} is not a number: {value!r}") from exc
