"""Parse trailers out of a commit message."""

from __future__ import annotations

REVIEWED_BY = "Reviewed-by: "


def extract_reviewers(message: str) -> list[str]:
    """Return the identity on every line that starts with ``Reviewed-by: ``.

    Order and duplicates are kept; a trailer that is not at the very start
    of its line does not count.
    """
    return [
        line[len(REVIEWED_BY):]
        for line in message.split("\n")
        if line.startswith(REVIEWED_BY)
    ]
