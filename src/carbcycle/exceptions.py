"""Exceptions raised outside the pure calculation core.

Target allocation, totals and the quantity solver never raise for
degenerate input; these cover loading and parsing at the edges.
"""

from __future__ import annotations

from typing import Optional


class CarbCycleError(Exception):
    """Base exception for carbcycle errors."""

    pass


class CatalogError(CarbCycleError):
    """Raised when a food catalog cannot be read or a custom food is invalid."""

    pass


class InvalidProfileError(CarbCycleError):
    """Raised when a stored or supplied profile record cannot be parsed."""

    pass


class StoreError(CarbCycleError):
    """Raised when persisted session data cannot be decoded."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class ConfigError(CarbCycleError):
    """Raised when the settings file cannot be parsed."""

    pass
