"""URL helpers"""

from typing import Any


def join_url(*parts: Any) -> str:
    """
    Join URL fragments with exactly one slash between them

    Leading slash of the first fragment, trailing slash of the last
    fragment and a scheme's ``//`` are preserved. Empty fragments are skipped.

    Args:
        *parts: URL fragments

    Returns:
        Joined URL
    """
    pieces = [str(p) for p in parts if p is not None and str(p) != ""]
    if not pieces:
        return ""

    result = []
    last = len(pieces) - 1
    for i, piece in enumerate(pieces):
        if i > 0:
            piece = piece.lstrip("/")
        if i < last:
            piece = piece.rstrip("/")
        if piece:
            result.append(piece)

    joined = "/".join(result)
    if pieces[-1].endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined
