"""A scratch directory under /tmp for copies of binaries being analysed."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from .strutil import has_prefix, path_join

_FALLBACK_DIR = "/tmp/"


class WorkDirManager:
    """Manages a work directory that must live under /tmp/."""

    def __init__(self, work_dir: str) -> None:
        if not has_prefix(work_dir, "/tmp/"):
            work_dir = _FALLBACK_DIR
        self.work_dir = work_dir

    def reset(self) -> None:
        """Remove the work directory and create it again, empty."""
        self.clean()
        self.create_if_needed()

    def create_if_needed(self) -> None:
        """Create the work directory if it does not exist."""
        if not os.path.exists(self.work_dir):
            os.mkdir(self.work_dir, 0o775)

    def clean(self) -> None:
        """Remove the work directory and everything in it, if present."""
        path = Path(self.work_dir)
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()

    def create_shadow_file(self, file_path: str) -> str:
        """Copy ``file_path`` into the work directory and return the copy's path."""
        origin = Path(file_path)
        shadow = path_join(self.work_dir, origin.name)
        if os.path.exists(shadow):
            raise FileExistsError(shadow)
        shutil.copy2(origin, shadow)
        return shadow

    def find_object_files(self, exclude: Iterable[str] = ()) -> list[str]:
        """Return paths of ``.o`` files in the work directory, skipping excluded names."""
        excluded = set(exclude)
        return sorted(
            str(entry)
            for entry in Path(self.work_dir).iterdir()
            if entry.name not in excluded and entry.suffix == ".o"
        )