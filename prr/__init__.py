"""prr: keep a release pull request checklist in sync with merged PRs."""

__version__ = "0.1.0"
