"""Extractor functions: each reads one field from a parsed commit page.

Callers import from here (``from commitwalk.extractors import find_author``);
submodules load on first attribute access so ``python -m
commitwalk.extractors.fields page.html`` runs without importing itself twice.
"""

from importlib import import_module as _im

_EXPORTS = {
    "fields": (
        "find_branch_link",
        "find_commit_hash",
        "find_author",
        "find_parent_link",
        "find_commit_message",
    ),
    "message": ("extract_reviewers",),
}
_OWNER = {name: mod for mod, names in _EXPORTS.items() for name in names}

__all__ = list(_OWNER)


def __getattr__(name: str):  # noqa: N807
    try:
        mod_name = _OWNER[name]
    except KeyError:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from None
    return getattr(_im(f"{__name__}.{mod_name}"), name)


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
