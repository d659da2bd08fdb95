"""
Pytest configuration and fixtures: Gitiles-shaped HTML pages and an
in-memory page fetcher, so nothing here needs a browser or the network.
"""
from html import escape

import pytest

from commitwalk.config import CrawlConfig
from commitwalk.errors import FetchError

REPO_URL = "https://gitiles.example.com/repo"
BRANCH_URL = "https://gitiles.example.com/repo/+/refs/heads/main"

HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40
HASH_BEFORE_A = "0" * 40

ALICE = "Alice <alice@example.com>"
BOB = "Bob <bob@example.com>"
CAROL = "Carol <carol@example.com>"


def render_commit_page(commit_hash, author, message, parent=None, include_author=True):
    """Markup shaped like a Gitiles commit page."""
    author_row = (
        f'<tr><th class="Metadata-title">author</th><td>{escape(author)}</td>'
        f"<td>Mon Jan 01 10:00:00 2024</td></tr>"
        if include_author
        else ""
    )
    parent_row = (
        f'<tr><th class="Metadata-title">parent</th>'
        f'<td><a href="/repo/+/{parent}">{parent}</a></td>'
        f'<td><span>[<a href="/repo/+/{commit_hash}%5E%21/">diff</a>]</span></td></tr>'
        if parent
        else ""
    )
    return (
        "<!DOCTYPE html>\n<html><head><title>repo - Git at Example</title></head><body>\n"
        '<div class="Breadcrumbs"><a href="/">example</a> / <a href="/repo/">repo</a></div>\n'
        '<div class="Metadata"><table>'
        f'<tr><th class="Metadata-title">commit</th><td>{commit_hash}</td>'
        f'<td><span>[<a href="/repo/+log/{commit_hash}">log</a>]</span></td></tr>'
        f"{author_row}{parent_row}"
        "</table></div>\n"
        f'<pre class="u-pre u-monospace MetadataMessage">{escape(message)}</pre>\n'
        "</body></html>"
    )


REPO_PAGE = (
    "<html><body><h3>Branches</h3><ul>"
    '<li><a href="/repo/+/refs/heads/dev">dev</a></li>'
    '<li><a href="/repo/+/refs/heads/main">main</a></li>'
    '<li><a href="/repo/+/refs/heads/main-old">main-old</a></li>'
    "</ul></body></html>"
)

MESSAGE_C = (
    "Fix flaky login test\n\nBUG=b:1234\nTEST=tast run\n\n"
    f"Reviewed-by: {BOB}\nReviewed-by: {CAROL}\n"
)
MESSAGE_B = f"Add retry helper\n\nReviewed-by: {ALICE}\n"
MESSAGE_A = "Initial import\n"


class FakeFetcher:
    """Serve canned markup by URL and remember the order of requests."""

    def __init__(self, pages):
        self.pages = dict(pages)
        self.requests = []

    def fetch(self, url):
        self.requests.append(url)
        try:
            return self.pages[url]
        except KeyError:
            raise FetchError(f"no page for {url}") from None


@pytest.fixture
def commit_page():
    return render_commit_page


@pytest.fixture
def chain_pages():
    """Repository page plus a three commit chain C -> B -> A."""
    return {
        REPO_URL: REPO_PAGE,
        BRANCH_URL: render_commit_page(HASH_C, ALICE, MESSAGE_C, parent=HASH_B),
        f"{REPO_URL}/+/{HASH_B}": render_commit_page(HASH_B, BOB, MESSAGE_B, parent=HASH_A),
        f"{REPO_URL}/+/{HASH_A}": render_commit_page(HASH_A, ALICE, MESSAGE_A, parent=HASH_BEFORE_A),
    }


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def config(tmp_path):
    return CrawlConfig(
        cnumber=3,
        repurl=REPO_URL,
        branch="main",
        timeout=5,
        cmtspath=str(tmp_path / "commits"),
        outpath=str(tmp_path / "out.csv"),
    )
