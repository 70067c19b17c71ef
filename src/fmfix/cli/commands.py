"""CLI command implementations"""

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from fmfix.config import Settings, load_config
from fmfix.core.engine import ScriptEngine
from fmfix.core.errors import DocumentError, FmfixError
from fmfix.core.pipeline import error_chain, run_fix
from fmfix.core.utils.fs import discover_files


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _script_source(inline_script: Optional[str], script_path: Optional[Path], repl: bool) -> Optional[str]:
    """Return the script text, or None for REPL mode. Exactly one source must be chosen."""
    chosen = sum([inline_script is not None, script_path is not None, repl])
    if chosen == 0:
        _fail("must specify one of inline script, a script file, or REPL")
    if chosen > 1:
        _fail("must specify only one of inline script, a script file, or REPL")
    if script_path is not None:
        try:
            return script_path.read_text(encoding="utf-8")
        except OSError as e:
            _fail(f"couldn't read script file {script_path}", e)
    return inline_script


def _echo_summary(succeeded: list, failed: list) -> None:
    """Print the run totals and, for each failure, its error chain."""
    typer.echo(
        f"Processed {len(succeeded) + len(failed)} file(s): "
        f"{len(succeeded)} succeeded, "
        f"{len(failed)} failed",
        err=True,
    )
    for path, error in failed:
        message, *causes = error_chain(error)
        typer.echo(f"{path}: {message}", err=True)
        for cause in causes:
            typer.echo(f"  caused by: {cause}", err=True)


def fix_cmd(
    files: Annotated[Optional[list[Path]], typer.Argument(help="Markdown files or directories to fix")] = None,
    inline_script: Annotated[Optional[str], typer.Option("--eval", "-e", help="Pass a short Lua script to run")] = None,
    script_path: Annotated[Optional[Path], typer.Option("--script", "-f", help="Read a Lua script from a file")] = None,
    repl: Annotated[bool, typer.Option("--repl", "-r", help="Run a Lua REPL for each file")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", "-n", help="Print fixed files instead of modifying them")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Print each file being processed")] = False,
    key_order: Annotated[Optional[str], typer.Option("--key-order", help="preserve or sort")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on an unclosed leading '---'")] = False,
    ):
    """Run a Lua script over the frontmatter of each file.

    The script sees the decoded frontmatter as `meta` and the body as
    `content`. Whatever it leaves in `meta` is written back; setting
    `meta = nil` removes the frontmatter block.
    """
    settings = _settings(overrides={
        "dry_run": dry_run or None, "verbose": verbose or None,
        "key_order": key_order, "unclosed_frontmatter": "error" if strict else None,
    })
    source = _script_source(inline_script, script_path, repl)

    try:
        engine = ScriptEngine(source, key_order=settings.key_order, max_memory=settings.max_memory)
    except FmfixError as e:
        _fail("couldn't set up", e)

    def report(path: Path, error: Optional[DocumentError]) -> None:
        if settings.verbose:
            typer.echo(f"{'ok' if error is None else 'failed'}: {path}", err=True)

    succeeded, failed = run_fix(
        engine, discover_files(files or []),
        dry_run=settings.dry_run, strict=settings.strict,
        out=sys.stdout, on_result=report,
    )
    _echo_summary(succeeded, failed)
    if failed:
        raise typer.Exit(1)
