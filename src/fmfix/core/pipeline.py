"""Batch orchestration: read, fix, and write each document in input order"""

from pathlib import Path
from typing import Callable, Optional, TextIO

from fmfix.core.emit import reassemble
from fmfix.core.engine import ScriptEngine
from fmfix.core.errors import DocumentError, DocumentReadError, DocumentWriteError
from fmfix.core.utils.fs import write_atomic


def read_document(path: Path) -> str:
    """Read the whole file as UTF-8 without newline translation."""
    try:
        with path.open(encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentReadError(f"couldn't read file contents: {e}") from e


def process_file(
    engine: ScriptEngine,
    path: Path,
    dry_run: bool = False,
    strict: bool = False,
    out: Optional[TextIO] = None,
    ) -> str:
    """Fix one file. Dry runs write the result to `out` instead of the file."""
    text = read_document(path)
    fixed = engine.fix(text, strict=strict)
    result = reassemble(fixed.frontmatter, fixed.body)

    if dry_run:
        if out is not None:
            out.write(result)
        return result

    try:
        write_atomic(path, result)
    except OSError as e:
        raise DocumentWriteError(f"couldn't modify file: {e}") from e
    return result


def run_fix(
    engine: ScriptEngine,
    paths: list[Path],
    dry_run: bool = False,
    strict: bool = False,
    out: Optional[TextIO] = None,
    on_result: Optional[Callable[[Path, Optional[DocumentError]], None]] = None,
    ) -> tuple[list[Path], list[tuple[Path, DocumentError]]]:
    """Process paths one at a time. Returns (succeeded, failed).

    A DocumentError fails only its own document; anything else propagates.
    """
    succeeded: list[Path] = []
    failed: list[tuple[Path, DocumentError]] = []
    for path in paths:
        try:
            process_file(engine, path, dry_run, strict, out)
        except DocumentError as e:
            failed.append((path, e))
            if on_result:
                on_result(path, e)
            continue
        succeeded.append(path)
        if on_result:
            on_result(path, None)
    return succeeded, failed


def error_chain(exc: BaseException) -> list[str]:
    """Messages from exc down its __cause__ chain."""
    messages = []
    while exc is not None:
        messages.append(str(exc) or type(exc).__name__)
        exc = exc.__cause__
    return messages
