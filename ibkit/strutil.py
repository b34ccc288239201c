"""Small string helpers used by the report readers and writers."""

from __future__ import annotations


def split(s: str, sep: str) -> list[str]:
    """Split ``s`` on ``sep`` the way a line reader does.

    A trailing separator does not produce a final empty field and an
    empty string yields no fields at all.
    """
    parts = s.split(sep)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def path_join(a: str, b: str) -> str:
    """Join two path parts with exactly one slash added when needed."""
    if a.endswith("/"):
        return a + b
    return a + "/" + b


def has_prefix(s: str, prefix: str) -> bool:
    """Return True if ``s`` starts with ``prefix``."""
    return s.startswith(prefix)


def has_suffix(s: str, suffix: str) -> bool:
    """Return True if ``s`` ends with ``suffix``."""
    return s.endswith(suffix)


def count_nonprintable(s: str | bytes | None, limit: int) -> int:
    """Count bytes outside printable ASCII among the first ``limit`` bytes.

    Text is measured as UTF-8 and stops at the first NUL byte.
    """
    if s is None:
        return 0
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    data = data.split(b"\0", 1)[0][: max(limit, 0)]
    return sum(1 for byte in data if not 0x20 <= byte <= 0x7E)