"""Filesystem helpers shared by the test suite."""

import os


def write_file(path, content, mtime=None):
    """Write ``content`` to ``path``, creating parents, optionally pinning mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def touch(path, mtime):
    """Set both access and modification time of ``path``."""
    os.utime(path, (mtime, mtime))
