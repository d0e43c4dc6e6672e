"""Build commands: prepare, release, upload, dev, backup."""
import sys
import time

import click

from kalenuxer.build import backup_project, process_project, release_project
from kalenuxer.config import BuildContext, open_project, resolve_project_dir
from kalenuxer.core.constants import (
    ALL_CATEGORIES,
    BASE_RELEASE,
    BASE_TEST,
    DEFAULT_BASE,
    DEV_SERVER_PORT,
    RESET_CATEGORIES,
)
from kalenuxer.core.receipt import StopRule, emit_receipt
from kalenuxer.serve import start_dev_server

from .output import error_box, success_box


_BUILD_OPTIONS = [
    click.argument("project"),
    click.option("--base", type=click.Choice([BASE_TEST, BASE_RELEASE]), default=DEFAULT_BASE,
                 show_default=True, help="Ledger namespace under store/times/"),
    click.option("--obf", "obfuscate", is_flag=True, help="Obfuscate processed output"),
    click.option("--new", "reset_all", is_flag=True,
                 help=f"Reset the {', '.join(RESET_CATEGORIES)} ledgers first"),
    click.option("--new-time", "reset_times", multiple=True, type=click.Choice(ALL_CATEGORIES),
                 help="Reset one category ledger first (repeatable)"),
]


def build_options(func):
    """PROJECT argument plus the --base/--obf/--new/--new-time options."""
    for decorator in reversed(_BUILD_OPTIONS):
        func = decorator(func)
    return func


def reset_categories(reset_all: bool, reset_times: tuple[str, ...]) -> list[str]:
    """Categories named by --new and --new-time, without duplicates."""
    categories = list(RESET_CATEGORIES) if reset_all else []
    categories += [c for c in reset_times if c not in categories]
    return categories


def _open(root, project, base, obfuscate, reset_all, reset_times) -> BuildContext:
    categories = reset_categories(reset_all, reset_times)
    ctx = open_project(project, base=base, root=root, obfuscate=obfuscate, reset=categories)
    if categories:
        emit_receipt("times_reset", {
            "project": project,
            "base": base,
            "categories": categories,
        })
    return ctx


def _fail(title: str, exc: Exception) -> None:
    error_box(title, str(exc))
    sys.exit(1 if isinstance(exc, StopRule) else 2)


@click.command()
@build_options
@click.pass_obj
def prepare(root, project, base, obfuscate, reset_all, reset_times):
    """Process changed sources into dist/release."""
    try:
        ctx = _open(root, project, base, obfuscate, reset_all, reset_times)
        result = process_project(ctx)
        success_box("Prepare: SUCCESS", [
            ("Project", project),
            ("Base", base),
            ("Processed", str(result.total_processed)),
            ("Unchanged", str(result.total_skipped)),
            ("Duration", f"{result.elapsed_ms}ms"),
        ], f"kalenuxer upload {project} --base {base}")
        sys.exit(0)
    except Exception as e:
        _fail("Prepare: FAILED", e)


@click.command()
@build_options
@click.pass_obj
def release(root, project, base, obfuscate, reset_all, reset_times):
    """Process changed sources, then upload changed release files."""
    try:
        ctx = _open(root, project, base, obfuscate, reset_all, reset_times)
        prepared = process_project(ctx)
        released = release_project(ctx)
        success_box("Release: SUCCESS", [
            ("Project", project),
            ("Base", base),
            ("Processed", str(prepared.total_processed)),
            ("Uploaded", str(len(released.uploaded))),
            ("Unchanged", str(released.skipped)),
            ("Duration", f"{prepared.elapsed_ms + released.elapsed_ms}ms"),
        ])
        sys.exit(0)
    except Exception as e:
        _fail("Release: FAILED", e)


@click.command()
@build_options
@click.pass_obj
def upload(root, project, base, obfuscate, reset_all, reset_times):
    """Upload changed release files without processing."""
    try:
        ctx = _open(root, project, base, obfuscate, reset_all, reset_times)
        released = release_project(ctx)
        success_box("Upload: SUCCESS", [
            ("Project", project),
            ("Base", base),
            ("Uploaded", str(len(released.uploaded))),
            ("Unchanged", str(released.skipped)),
            ("Duration", f"{released.elapsed_ms}ms"),
        ])
        sys.exit(0)
    except Exception as e:
        _fail("Upload: FAILED", e)


@click.command()
@build_options
@click.option("--port", default=DEV_SERVER_PORT, show_default=True, help="Port to listen on")
@click.option("--no-open", "no_open", is_flag=True, help="Do not open a browser")
@click.pass_obj
def dev(root, project, base, obfuscate, reset_all, reset_times, port, no_open):
    """Build, serve dist/release and rebuild on source changes."""
    try:
        ctx = _open(root, project, base, obfuscate, reset_all, reset_times)
        start_dev_server(ctx, port=port, open_browser=not no_open)
    except KeyboardInterrupt:
        click.echo("Dev server stopped")
    except Exception as e:
        _fail("Dev: FAILED", e)


@click.command()
@click.argument("project")
@click.pass_obj
def backup(root, project):
    """Copy the whole project to backups/all/<project>/<timestamp>."""
    t0 = time.perf_counter()
    try:
        project_dir = resolve_project_dir(project, root)
        dest = backup_project(project, project_dir, root)
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        success_box("Backup: SUCCESS", [
            ("Project", project),
            ("Destination", str(dest)),
            ("Duration", f"{elapsed_ms}ms"),
        ])
        sys.exit(0)
    except Exception as e:
        _fail("Backup: FAILED", e)
