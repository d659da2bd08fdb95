"""Walk a branch's history page by page and tally who wrote and reviewed it."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urljoin, urlsplit

from commitwalk.browser import PageFetcher
from commitwalk.config import CrawlConfig
from commitwalk.contributions import ContributionTally, render_csv
from commitwalk.dom import parse_document
from commitwalk.errors import FieldNotFoundError
from commitwalk.extractors import (
    extract_reviewers,
    find_author,
    find_branch_link,
    find_commit_hash,
    find_commit_message,
    find_parent_link,
)
from commitwalk.models import CommitRecord
from commitwalk.storage import write_commit_message, write_table

logger = logging.getLogger(__name__)


@dataclass
class CrawlResult:
    tally: ContributionTally
    commit_files: list[Path] = field(default_factory=list)
    table_path: Path | None = None
    branch_url: str = ""

    @property
    def commits(self) -> int:
        return len(self.commit_files)


def site_origin(url: str) -> str:
    """Return ``scheme://host`` of *url*."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def resolve_branch_url(fetcher: PageFetcher, repo_url: str, branch: str) -> str:
    """Fetch the repository page and return the absolute URL of *branch*."""
    tree = parse_document(fetcher.fetch(repo_url))
    href = find_branch_link(tree, branch)
    url = urljoin(site_origin(repo_url) + "/", href)
    logger.info("Branch %r resolved to %s", branch, url)
    return url


def extract_commit(markup: str, url: str, repo_url: str, stop_at_root: bool = False) -> CommitRecord:
    """Pull every field of one commit page; fails before anything is recorded."""
    tree = parse_document(markup)
    commit_hash = find_commit_hash(tree)
    author = find_author(tree)
    message = find_commit_message(tree)
    try:
        parent_link = find_parent_link(tree, repo_url)
    except FieldNotFoundError:
        if not stop_at_root:
            raise
        logger.warning("Commit %s has no parent; treating it as the root commit", commit_hash)
        parent_link = None
    return CommitRecord(hash=commit_hash, author=author, message=message, parent_link=parent_link, url=url)


def walk_commits(
    fetcher: PageFetcher,
    start_url: str,
    repo_url: str,
    count: int,
    stop_at_root: bool = False,
) -> Iterator[CommitRecord]:
    """Yield up to *count* commits, following parent links from *start_url*.

    Strictly sequential: each page's parent link is the next page fetched.
    Stops early only when *stop_at_root* is set and a commit has no parent.
    """
    link = start_url
    for i in range(count):
        record = extract_commit(fetcher.fetch(link), link, repo_url, stop_at_root)
        logger.info("[%d/%d] %s by %s", i + 1, count, record.hash, record.author)
        yield record
        if record.parent_link is None:
            return
        link = record.parent_link


def crawl(fetcher: PageFetcher, config: CrawlConfig, tally: ContributionTally | None = None) -> CrawlResult:
    """Run a full crawl: resolve the branch, walk ``config.cnumber`` commits,
    write one ``<hash>.commit`` file each and, if ``config.outpath`` is set,
    the summary table.

    Any error aborts the run; files written for earlier commits are kept.
    """
    result = CrawlResult(tally=tally if tally is not None else ContributionTally())
    result.branch_url = resolve_branch_url(fetcher, config.repurl, config.branch)

    for record in walk_commits(fetcher, result.branch_url, config.repurl, config.cnumber, config.stop_at_root):
        result.tally.record_creation(record.author)
        for reviewer in extract_reviewers(record.message):
            result.tally.record_review(reviewer)
        result.commit_files.append(write_commit_message(config.cmtspath, record.hash, record.message))

    if config.outpath:
        result.table_path = write_table(config.outpath, render_csv(result.tally))
    return result
