"""
Hierarchical endpoint names.

Names are composed from segments joined by a single fixed separator, so an
identifier is the same on every platform. Backslashes are read as separators,
"." segments collapse away and ".." segments are refused.
"""

from registrar.errors import ValidationError


SEPARATOR = "/"
CURRENT = "."
PARENT = ".."


def split(path: str) -> list[str]:
    """
    Split a path into its meaningful segments.

    Args:
        path (str): A path such as 'nexus/getGames' or '.'.
    Returns:
        list[str]: The ordered segments, without empty or '.' segments.
    Raises:
        ValidationError: If the path contains a '..' segment.
    """
    segments = []
    for segment in path.replace("\\", SEPARATOR).split(SEPARATOR):
        if not segment or segment == CURRENT:
            continue
        if segment == PARENT:
            raise ValidationError(f"Parent segments are not allowed in '{path}'")
        segments.append(segment)

    return segments


def compose(base: str, segment: str) -> str:
    """
    Join a base path and a segment into one hierarchical name.

    Examples:
        >>> compose(".", "ping")
        'ping'
        >>> compose("nexus", "getGames")
        'nexus/getGames'

    Raises:
        ValidationError: If the segment reduces to nothing.
    """
    tail = split(segment)
    if not tail:
        raise ValidationError(f"Cannot compose empty segment '{segment}' onto '{base}'")

    return SEPARATOR.join(split(base) + tail)
