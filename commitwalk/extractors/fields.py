"""Locate commit metadata on a rendered Gitiles page.

Gitiles renders commit metadata as a table of label/value cells::

    <tr><th>commit</th><td>0a1b2c...</td>...</tr>
    <tr><th>author</th><td>Jane Doe &lt;jane@example.com&gt;</td>...</tr>
    <tr><th>parent</th><td><a href="...">9f8e7d...</a></td></tr>

and the message as a single ``<pre>`` block. Each function below searches
the tree depth-first in document order and returns the first match, or
raises :class:`FieldNotFoundError`. They are positional on purpose: a
markup change breaks one extractor loudly instead of yielding wrong data.
"""

from __future__ import annotations

import sys
from pathlib import Path

from commitwalk.dom import Element, Text, parse_document, walk
from commitwalk.errors import FieldNotFoundError


def find_branch_link(tree: Element, branch: str) -> str:
    """Return the href of the first ``<a>`` whose href contains ``/<branch>``."""
    needle = "/" + branch
    for node, _ in walk(tree):
        if isinstance(node, Element) and node.tag == "a":
            for key, value in node.attrs:
                if key == "href" and needle in value:
                    return value
    raise FieldNotFoundError("branch link", f"no anchor pointing at {needle!r}")


def find_commit_hash(tree: Element) -> str:
    return _labelled_value(tree, "commit", depth=1)


def find_author(tree: Element) -> str:
    return _labelled_value(tree, "author", depth=1)


def find_parent_link(tree: Element, repo_url: str) -> str:
    """Return the absolute URL of the parent commit.

    The parent hash sits inside a hyperlink, one level below where the
    commit and author values live.
    """
    value = _labelled_value(tree, "parent", depth=2)
    return repo_url.rstrip("/") + "/+/" + value


def find_commit_message(tree: Element) -> str:
    """Concatenate every text node under the first ``<pre>`` element."""
    for node, _ in walk(tree):
        if isinstance(node, Element) and node.tag == "pre":
            parts = [n.data for n, _ in walk(node) if isinstance(n, Text)]
            if not parts:
                raise FieldNotFoundError("commit message", "<pre> has no text")
            return "".join(parts)
    raise FieldNotFoundError("commit message", "no <pre> element")


def _labelled_value(tree: Element, label: str, depth: int) -> str:
    """Read the value cell next to the first text node equal to *label*.

    From the label's parent, step to its next element sibling and then
    *depth* times into the first child; that node must be text. Only the
    first label counts: if its chain is broken the lookup fails.
    """
    for node, ancestors in walk(tree):
        if not (isinstance(node, Text) and node.data == label):
            continue
        if len(ancestors) < 2:
            raise FieldNotFoundError(label, "label has no enclosing row")
        cell, row = ancestors[-1], ancestors[-2]
        value = _descend(row.next_element_after(cell), depth)
        if value is None:
            raise FieldNotFoundError(label, "value cell missing or not text")
        return value
    raise FieldNotFoundError(label)


def _descend(node: Element | None, depth: int) -> str | None:
    current = node
    for _ in range(depth):
        if not isinstance(current, Element) or not current.children:
            return None
        current = current.children[0]
    return current.data if isinstance(current, Text) else None


if __name__ == "__main__":
    page = Path(sys.argv[1]).read_text()
    repo = sys.argv[2] if len(sys.argv) > 2 else "https://chromium.googlesource.com/chromiumos/platform/tast-tests"
    doc = parse_document(page)
    print(f"commit : {find_commit_hash(doc)}")
    print(f"author : {find_author(doc)}")
    print(f"parent : {find_parent_link(doc, repo)}")
    print(f"message:\n{find_commit_message(doc)}")
