"""Pytest configuration and fixtures for pg_flame tests."""

import json

import pytest

from pg_flame.plan import Node


# EXPLAIN (ANALYZE, BUFFERS, FORMAT JSON) output for a query with an
# uncorrelated subquery, trimmed to the keys pg_flame reads.
EXPLAIN_JSON = [
    {
        "Plan": {
            "Node Type": "Hash Join",
            "Actual Total Time": 10.0,
            "Hash Cond": "(c.id = o.customer_id)",
            "Join Filter": "(o.total > $0)",
            "Shared Hit Blocks": 42,
            "Plans": [
                {
                    "Node Type": "Aggregate",
                    "Parent Relationship": "InitPlan",
                    "Actual Total Time": 1.5,
                    "Plans": [
                        {
                            "Node Type": "Seq Scan",
                            "Parent Relationship": "Outer",
                            "Relation Name": "orders",
                            "Actual Total Time": 1.2,
                            "Shared Read Blocks": 7,
                        }
                    ],
                },
                {
                    "Node Type": "Seq Scan",
                    "Parent Relationship": "Outer",
                    "Relation Name": "orders",
                    "Actual Total Time": 4.0,
                    "Filter": "(status <> 'void')",
                },
                {
                    "Node Type": "Hash",
                    "Parent Relationship": "Inner",
                    "Actual Total Time": 3.0,
                    "Hash Buckets": 1024,
                    "Hash Batches": 1,
                    "Peak Memory Usage": 64,
                    "Plans": [
                        {
                            "Node Type": "Index Scan",
                            "Parent Relationship": "Outer",
                            "Relation Name": "customers",
                            "Index Name": "customers_pkey",
                            "Actual Total Time": 2.0,
                            "Index Cond": "(id < 100)",
                        }
                    ],
                },
            ],
        },
        "Planning Time": 2.5,
        "Triggers": [],
        "Execution Time": 11.8,
    }
]


@pytest.fixture
def explain_json() -> str:
    return json.dumps(EXPLAIN_JSON)


@pytest.fixture
def plan_file(tmp_path, explain_json):
    path = tmp_path / "plan.json"
    path.write_text(explain_json)
    return path


@pytest.fixture
def init_plan_tree() -> Node:
    """Execution root with time=10.0 and one init-plan child of value 1.5."""
    return Node(
        method="Result",
        total_time=10.0,
        children=(
            Node(method="Aggregate", parent_relationship="InitPlan", total_time=1.5),
            Node(method="Seq Scan", table="t", parent_relationship="Outer", total_time=8.0),
        ),
    )
