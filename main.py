"""CLI entrypoint for commitwalk.

Usage:
    python main.py [options] <command> [options]

Commands:
    crawl        Walk N commits, write <hash>.commit files and the summary CSV
    messages     Walk N commits and only write the <hash>.commit files
    branch       Resolve and print the absolute URL of a branch
    extract      Run the extractors on a saved commit page (no browser needed)

Options:
    --cnumber N         Number of commits to walk (default: 10)
    --repurl URL        Gitiles repository URL (default: chromiumos tast-tests)
    --branch NAME       Branch to start from (default: main)
    --timeout S         Time budget in seconds for the whole run (default: 5)
    --cmtspath DIR      Directory for commit message files (default: cwd)
    --outpath FILE      Summary table path for `crawl` (default: out.csv)
    --devtools URL      Chrome remote debugging endpoint (default: http://127.0.0.1:9222)
    --stop-at-root      Stop cleanly at a commit without parent instead of failing
    --json              Also print the contributor summary as JSON
    --verbose           Debug logging
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from commitwalk.browser import BrowserSession
from commitwalk.config import DEFAULT_DEVTOOLS_URL, DEFAULT_REPO_URL, CrawlConfig
from commitwalk.errors import CrawlError
from commitwalk.extractors import extract_reviewers
from commitwalk.models import to_json
from commitwalk.traversal import CrawlResult, crawl, extract_commit, resolve_branch_url

logger = logging.getLogger("commitwalk")


def _run_crawl(args: argparse.Namespace, aggregate: bool) -> CrawlResult:
    config = CrawlConfig.from_args(args, aggregate=aggregate).validate(require_outpath=aggregate)
    print(f"Walking {config.cnumber} commit(s) of '{config.branch}' in {config.repurl} …")
    with BrowserSession(config.devtools_url, config.timeout) as browser:
        return crawl(browser, config)


def cmd_crawl(args: argparse.Namespace) -> None:
    result = _run_crawl(args, aggregate=True)
    print(f"\n{result.commits} commit message(s) written to {args.cmtspath or '.'}")
    print(f"Contributors: {len(result.tally)}\n")
    for row in result.tally.rows()[:20]:
        print(f"  {row.contributor:<45}  created={row.created:<4}  reviewed={row.reviewed}")
    if len(result.tally) > 20:
        print(f"  ... and {len(result.tally) - 20} more")
    print(f"\nSummary table written to: {result.table_path}")
    if args.json:
        print(to_json(result.tally.rows()))


def cmd_messages(args: argparse.Namespace) -> None:
    result = _run_crawl(args, aggregate=False)
    for path in result.commit_files:
        print(f"  {path}")
    print(f"\n{result.commits} commit message(s) written")


def cmd_branch(args: argparse.Namespace) -> None:
    config = CrawlConfig.from_args(args, aggregate=False).validate(require_outpath=False)
    with BrowserSession(config.devtools_url, config.timeout) as browser:
        print(resolve_branch_url(browser, config.repurl, config.branch))


def cmd_extract(args: argparse.Namespace) -> None:
    page = Path(args.page)
    try:
        markup = page.read_text(encoding="utf-8")
    except OSError as exc:
        raise CrawlError(f"can't read {page}: {exc}") from exc
    record = extract_commit(markup, str(page), args.repurl, stop_at_root=args.stop_at_root)
    if args.json:
        print(to_json(record))
        return
    print(f"commit   : {record.hash}")
    print(f"author   : {record.author}")
    print(f"parent   : {record.parent_link or '(none)'}")
    reviewers = extract_reviewers(record.message)
    print(f"reviewers: {', '.join(reviewers) if reviewers else '(none)'}\n")
    print(record.message)


def _common_flags(with_defaults: bool) -> argparse.ArgumentParser:
    """Shared flags. Only the top-level copy carries defaults, so a subcommand
    never resets a value given before it."""

    def default(value):
        return value if with_defaults else argparse.SUPPRESS

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--cnumber", type=int, default=default(10), metavar="N", help="Number of commits to load")
    common.add_argument("--repurl", default=default(DEFAULT_REPO_URL), metavar="URL", help="Repository URL")
    common.add_argument("--branch", default=default("main"), metavar="NAME", help="Branch name")
    common.add_argument(
        "--timeout", type=float, default=default(5.0), metavar="S", help="Timeout in seconds for the whole run"
    )
    common.add_argument("--cmtspath", default=default(""), metavar="DIR", help="Directory for commit message files")
    common.add_argument("--outpath", default=default("out.csv"), metavar="FILE", help="Path of the summary CSV")
    common.add_argument(
        "--devtools", default=default(DEFAULT_DEVTOOLS_URL), metavar="URL", help="Chrome remote debugging endpoint"
    )
    common.add_argument(
        "--stop-at-root",
        action="store_true",
        default=default(False),
        help="Treat a commit without parent as the end of history instead of an error",
    )
    common.add_argument("--json", action="store_true", default=default(False), help="Print JSON output")
    common.add_argument("--verbose", action="store_true", default=default(False), help="Debug logging")
    return common


def build_parser() -> argparse.ArgumentParser:
    # Flags are accepted both before and after the subcommand
    common = _common_flags(with_defaults=False)

    parser = argparse.ArgumentParser(
        prog="commitwalk",
        description="Walk a Gitiles commit history through a remote browser.",
        parents=[_common_flags(with_defaults=True)],
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("crawl", parents=[common], help="Write commit files and the contributor summary")
    sub.add_parser("messages", parents=[common], help="Write commit files only")
    sub.add_parser("branch", parents=[common], help="Print the resolved branch URL")
    extract = sub.add_parser("extract", parents=[common], help="Extract fields from a saved commit page")
    extract.add_argument("page", metavar="FILE", help="Saved HTML of a commit page")

    return parser


_COMMANDS = {
    "crawl": cmd_crawl,
    "messages": cmd_messages,
    "branch": cmd_branch,
    "extract": cmd_extract,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    try:
        _COMMANDS[args.command](args)
    except CrawlError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
