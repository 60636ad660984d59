"""
Error classifications for indicator computation.

Provider and data-sufficiency errors are recoverable per symbol and are
turned into error snapshots by the per-symbol fetcher. Invalid request
parameters are rejected before any fetch work starts.
"""

from __future__ import annotations

from typing import Any, Optional


class MomentumDeskError(Exception):
    """Base class for all errors raised by the indicator pipeline."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ProviderError(MomentumDeskError):
    """The upstream price source could not deliver a usable series."""

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol


class ProviderUnavailableError(ProviderError):
    """Network failure, timeout or non-2xx status from the price source."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class EmptyResultError(ProviderError):
    """The price source answered but returned no result for the symbol."""


class MalformedResponseError(ProviderError):
    """The price source answered with a payload that could not be parsed."""


class InsufficientHistoryError(MomentumDeskError):
    """Fewer valid closes than the requested period needs."""

    def __init__(self, message: str, required_count: Optional[int] = None,
                 available_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required_count = required_count
        self.available_count = available_count


class InvalidParameterError(MomentumDeskError):
    """A request parameter lies outside its allowed set."""

    def __init__(self, message: str, parameter: Optional[str] = None,
                 value: Any = None, allowed: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.parameter = parameter
        self.value = value
        self.allowed = allowed or []
