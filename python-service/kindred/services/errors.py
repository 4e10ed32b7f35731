"""Service-level failures mapped onto HTTP responses by the routers."""

from __future__ import annotations


class UnauthenticatedError(PermissionError):
    """No verified caller identity is available."""


class FeedQueryError(RuntimeError):
    """The primary feed scan failed; ``diagnostic`` is for operators only."""

    def __init__(self, diagnostic: str) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic


__all__ = ["FeedQueryError", "UnauthenticatedError"]
