"""Async filesystem helpers.

Blocking calls run in a worker thread so the event loop stays free while the
bundler stats, reads and writes files. Errors surface as ``OSError``.
"""

import asyncio
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

PathLike = Union[str, Path]


def mtime_from_stat(st: os.stat_result) -> datetime:
    return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)


async def stat_mtime(path: PathLike) -> datetime:
    st = await asyncio.to_thread(os.stat, path)
    return mtime_from_stat(st)


async def read_text(path: PathLike) -> str:
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")


async def write_text(path: PathLike, content: str) -> None:
    await asyncio.to_thread(Path(path).write_text, content, encoding="utf-8")


async def exists(path: PathLike) -> bool:
    return await asyncio.to_thread(os.path.exists, path)


async def is_dir(path: PathLike) -> bool:
    return await asyncio.to_thread(os.path.isdir, path)


async def is_file(path: PathLike) -> bool:
    return await asyncio.to_thread(os.path.isfile, path)


async def is_symlink(path: PathLike) -> bool:
    return await asyncio.to_thread(os.path.islink, path)


async def ensure_dir(path: PathLike) -> None:
    await asyncio.to_thread(os.makedirs, path, exist_ok=True)


async def unlink(path: PathLike) -> None:
    await asyncio.to_thread(os.unlink, path)


async def rmdir(path: PathLike) -> None:
    await asyncio.to_thread(os.rmdir, path)


async def listdir(path: PathLike) -> List[str]:
    return await asyncio.to_thread(os.listdir, path)


async def remove_empty_dirs(directory: PathLike) -> bool:
    """
    Remove ``directory`` and every descendant directory that ends up empty.

    Subdirectories are evaluated first, so a directory whose only contents
    were empty subdirectories is removed as well. Directories holding files
    are kept.

    Returns:
        True if ``directory`` itself was removed
    """
    directory = Path(directory)
    for name in await listdir(directory):
        child = directory / name
        if await is_dir(child) and not await is_symlink(child):
            await remove_empty_dirs(child)

    if not await listdir(directory):
        await rmdir(directory)
        return True
    return False
