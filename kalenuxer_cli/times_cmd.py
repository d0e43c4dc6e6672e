"""Times commands: show, reset."""
import sys

import click

from kalenuxer.config import resolve_project_dir
from kalenuxer.core.constants import (
    ALL_CATEGORIES,
    BASE_RELEASE,
    BASE_TEST,
    DEFAULT_BASE,
    RESET_CATEGORIES,
)
from kalenuxer.core.receipt import StopRule, emit_receipt
from kalenuxer.ledger import Ledger

from .output import error_box, success_box, table

_base_option = click.option("--base", type=click.Choice([BASE_TEST, BASE_RELEASE]),
                            default=DEFAULT_BASE, show_default=True,
                            help="Ledger namespace under store/times/")


@click.group()
def times():
    """Inspect and reset change ledgers."""
    pass


@times.command()
@click.argument("project")
@click.argument("category", type=click.Choice(ALL_CATEGORIES))
@_base_option
@click.pass_obj
def show(root, project, category, base):
    """List the fingerprints recorded for one category."""
    try:
        project_dir = resolve_project_dir(project, root)
        ledger = Ledger.for_project(project_dir, base, [category])
        snapshot = ledger.snapshot(category)
    except StopRule as e:
        error_box("Times Show: FAILED", str(e))
        sys.exit(1)

    if not snapshot:
        click.echo(f"No {category} entries recorded for {project} ({base})")
        return
    table(
        ["Key", "Processed", "Uploaded"],
        [[key, rec.get("processed_at", "-"), rec.get("uploaded_at", "-")]
         for key, rec in sorted(snapshot.items())],
    )


@times.command()
@click.argument("project")
@click.argument("categories", nargs=-1, type=click.Choice(ALL_CATEGORIES))
@_base_option
@click.pass_obj
def reset(root, project, categories, base):
    """Write empty ledgers (default: every category --new resets)."""
    categories = list(categories) or list(RESET_CATEGORIES)
    try:
        project_dir = resolve_project_dir(project, root)
        Ledger.for_project(project_dir, base, categories, reset=categories)
    except StopRule as e:
        error_box("Times Reset: FAILED", str(e))
        sys.exit(1)

    emit_receipt("times_reset", {
        "project": project,
        "base": base,
        "categories": categories,
    })
    success_box("Times Reset: SUCCESS", [
        ("Project", project),
        ("Base", base),
        ("Categories", ", ".join(categories)),
    ], f"kalenuxer prepare {project} --base {base}")
