"""Reading raw files kept under the user's ``~/.raw`` directory."""

from pathlib import Path


class UnsafePathError(ValueError):
    """Raised when a requested path tries to climb out of the raw directory."""


def read_raw_file(relative, home=None):
    """Return the text of ``~/.raw/<relative>``.

    Paths containing ``..`` are refused.
    """
    if ".." in relative:
        raise UnsafePathError("upper directory is not allowed")
    base = Path.home() if home is None else Path(home)
    target = Path(f"{base}/.raw/{relative}")
    return target.read_text(encoding="utf-8")