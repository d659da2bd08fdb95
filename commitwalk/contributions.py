"""Per-contributor created/reviewed counts and their CSV rendering."""

from __future__ import annotations

from collections.abc import Iterator

from commitwalk.models import Contribution, ContributorStats

CSV_HEADER = "contributor,created,reviewed"


class ContributionTally:
    """Mapping of contributor identity to :class:`Contribution`.

    Counts only grow. Updates go through the stored record, so repeated
    calls for the same identity accumulate.
    """

    def __init__(self) -> None:
        self._counts: dict[str, Contribution] = {}

    def record_creation(self, identity: str) -> None:
        self._entry(identity).created += 1

    def record_review(self, identity: str) -> None:
        self._entry(identity).reviewed += 1

    def _entry(self, identity: str) -> Contribution:
        entry = self._counts.get(identity)
        if entry is None:
            entry = self._counts[identity] = Contribution()
        return entry

    def get(self, identity: str) -> Contribution | None:
        return self._counts.get(identity)

    def items(self):
        return self._counts.items()

    def rows(self) -> list[ContributorStats]:
        """Flat rows, most commits created first (reviews break ties)."""
        return [
            ContributorStats(contributor=name, created=c.created, reviewed=c.reviewed)
            for name, c in sorted(self._counts.items(), key=lambda x: (-x[1].created, -x[1].reviewed))
        ]

    def __contains__(self, identity: object) -> bool:
        return identity in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)


def render_csv(tally: ContributionTally) -> str:
    """Render *tally* as ``contributor,created,reviewed`` lines.

    Identities are written unquoted and are assumed not to contain commas.
    No trailing newline.
    """
    lines = [CSV_HEADER]
    for name, c in tally.items():
        lines.append(f"{name},{c.created},{c.reviewed}")
    return "\n".join(lines)
