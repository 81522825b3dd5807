"""General utils functions"""

import os
from typing import Optional

HOME_SHORTHAND = "~/"


def expand_home(path: str, home: Optional[str] = None) -> str:
    """Expand a leading ``~/`` to the user's home directory.

    Only the ``~/`` form is recognised; ``~user`` and a bare ``~`` are left
    untouched.

    Args:
        path: Path as written in the configuration
        home: Home directory to use, defaults to ``$HOME``

    Returns:
        The expanded path
    """
    if not path.startswith(HOME_SHORTHAND):
        return path
    if home is None:
        home = os.environ.get("HOME") or os.path.expanduser("~")
    return f"{home.rstrip('/')}/{path[len(HOME_SHORTHAND):]}"


def to_posix_path(path: str, sep: str = os.sep) -> str:
    """Normalize host separators to forward slashes."""
    if sep == "/":
        return path
    return path.replace(sep, "/")
