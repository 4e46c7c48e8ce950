"""Error taxonomy for catalog listing.

Every error raised while resolving a selection or streaming live specs
derives from CatalogListError, so frontends can map the whole family to
exit codes in one place.
"""

from __future__ import annotations


class CatalogListError(RuntimeError):
    """Base class for catalog listing failures."""


class AmbiguousSelectionError(CatalogListError):
    """Raised when more default prefixes resolve than the configured maximum."""

    def __init__(self, max_prefixes: int, prefixes: list[str] | None = None):
        self.max_prefixes = max_prefixes
        self.prefixes = list(prefixes or [])
        super().__init__(
            "an explicit --prefix or --name argument is required since you have "
            f"access to more than {max_prefixes} prefixes"
        )


class EmptyAccessError(CatalogListError):
    """Raised when no prefixes or names could be resolved at all."""

    def __init__(self) -> None:
        super().__init__(
            "the current user does not have access to any catalog prefixes, "
            "please ask your tenant administrator for help"
        )


class MissingNamedEntryError(CatalogListError):
    """Raised when an explicitly requested name has no live spec."""

    def __init__(self, catalog_name: str):
        self.catalog_name = catalog_name
        super().__init__(f"no live spec exists for name: '{catalog_name}'")


class ProtocolViolationError(CatalogListError):
    """Raised when the API reports more pages but returns no end cursor."""


class TransportError(CatalogListError):
    """Raised on network, HTTP or response decoding failures."""
