from __future__ import annotations


class ConfigurationError(Exception):
    """Raised before the crawl starts when a required setting is missing or invalid."""
    pass


class RepositoryLookupError(Exception):
    """Raised by a repository lookup when GitHub cannot answer for one repo."""

    def __init__(self, owner: str, name: str, reason: str) -> None:
        self.owner  = owner
        self.name   = name
        self.reason = reason
        super().__init__(f"{owner}/{name}: {reason}")
