#!/usr/bin/env python3
"""
cli.py

Command-line interface for turning PostgreSQL EXPLAIN output into flame graphs.

Usage:
  psql -qAtc 'EXPLAIN (ANALYZE, BUFFERS, FORMAT JSON) SELECT ...' > plan.json
  pg_flame plan.json > flamegraph.html
  pg_flame --format tree < plan.json
"""
import click
from rich import print

from pg_flame import __version__
from pg_flame.exporters import html, view_flame
from pg_flame.flame import build_flame
from pg_flame.plan import PlanError, parse


@click.command()
@click.argument("plan_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--output", "-o", type=click.File("w"), default="-",
    help="Write to this file instead of stdout"
)
@click.option(
    "--format", "-f", "fmt", envvar="PG_FLAME_FORMAT", show_default=True,
    type=click.Choice(["html", "json", "tree"]), default="html",
    help="html page, raw flame JSON, or a tree printed to the terminal"
)
@click.version_option(__version__, prog_name="pg_flame")
def main(plan_file, output, fmt):
    """
    Read EXPLAIN (ANALYZE, BUFFERS, FORMAT JSON) output from PLAN_FILE
    (or stdin) and render it as a flame graph.
    """
    try:
        plan = parse(plan_file)
    except PlanError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if fmt == "html":
        html.generate(output, plan)
    elif fmt == "json":
        click.echo(html.to_json(build_flame(plan), indent=2), file=output)
    else:
        print(view_flame.build_console_tree(build_flame(plan)), file=output)


if __name__ == "__main__":
    main()
