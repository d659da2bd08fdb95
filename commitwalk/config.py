"""Run options and their validation."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from commitwalk.errors import ConfigurationError

DEFAULT_REPO_URL = "https://chromium.googlesource.com/chromiumos/platform/tast-tests/"
DEFAULT_DEVTOOLS_URL = "http://127.0.0.1:9222"


@dataclass
class CrawlConfig:
    cnumber: int = 10
    repurl: str = DEFAULT_REPO_URL
    branch: str = "main"
    timeout: float = 5.0  # seconds, for the whole run
    cmtspath: str = ""  # directory for <hash>.commit files; "" is the cwd
    outpath: str | None = "out.csv"  # None skips the summary table
    devtools_url: str = DEFAULT_DEVTOOLS_URL
    stop_at_root: bool = False

    def validate(self, require_outpath: bool = True) -> CrawlConfig:
        """Raise :class:`ConfigurationError` on the first bad option."""
        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError("invalid timeout parameter")
        if not self.branch:
            raise ConfigurationError("empty branch is invalid")
        if not self.repurl:
            raise ConfigurationError("empty url is invalid")
        if self.cnumber is None or self.cnumber <= 0:
            raise ConfigurationError("invalid cnumber")
        if require_outpath and not self.outpath:
            raise ConfigurationError("output path can't be empty")
        if not self.devtools_url:
            raise ConfigurationError("empty devtools url is invalid")
        return self

    @classmethod
    def from_args(cls, args: argparse.Namespace, aggregate: bool = True) -> CrawlConfig:
        return cls(
            cnumber=args.cnumber,
            repurl=args.repurl,
            branch=args.branch,
            timeout=args.timeout,
            cmtspath=args.cmtspath,
            outpath=args.outpath if aggregate else None,
            devtools_url=args.devtools,
            stop_at_root=args.stop_at_root,
        )
