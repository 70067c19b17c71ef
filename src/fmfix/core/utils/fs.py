"""File discovery and atomic in-place replacement"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable


MD_EXTENSIONS = {'.md', '.mdx', '.markdown'}


def discover_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into sorted markdown files; explicit paths are kept as given."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in MD_EXTENSIONS))
        else:
            files.append(path)
    return files


def write_atomic(path: Path, text: str) -> None:
    """Write text next to path, then rename over it so readers never see a partial file."""
    tmp = tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", newline="", dir=path.parent,
        prefix=f".{path.name}.", suffix=".tmp", delete=False,
    )
    try:
        with tmp:
            tmp.write(text)
        if path.exists():
            shutil.copymode(path, tmp.name)
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise
