"""
html.py

Serialize a flame tree to JSON and embed it in a self-contained HTML page
rendered by d3-flame-graph.
"""

import json
import logging
from typing import IO, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from pg_flame.flame import Flame, build_flame
from pg_flame.plan import Plan

log = logging.getLogger(__name__)

TEMPLATE_NAME = "flame.html.j2"


def to_dict(flame: Flame) -> dict:
    """Wire shape consumed by the page: color is "" when unset."""
    return {
        "name": flame.name,
        "value": flame.value,
        "time": flame.time,
        "detail": flame.detail,
        "color": flame.color or "",
        "init_plan": flame.init_plan,
        "children": [to_dict(child) for child in flame.children],
    }


def to_json(flame: Flame, indent: Optional[int] = None) -> str:
    return json.dumps(to_dict(flame), indent=indent)


def _script_safe(data: str) -> str:
    # Keep "</script>" inside a string literal from closing the tag
    return data.replace("</", "<\\/")


def render(flame: Flame, title: str = "Query Plan") -> str:
    env = Environment(
        loader=PackageLoader("pg_flame", "templates"),
        autoescape=select_autoescape(["html", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)
    data = _script_safe(to_json(flame))
    log.debug("embedding %d bytes of flame data", len(data))
    return template.render(data=data, title=title)


def generate(out: IO[str], plan: Plan) -> None:
    """Write the HTML flame graph for `plan` to `out`."""
    out.write(render(build_flame(plan)))
