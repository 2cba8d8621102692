"""Display modes for the list command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DetailMode:
    show_content: bool = False
    show_properties: bool = False


@dataclass(frozen=True)
class TotalsMode:
    """Report only the number of scheduled jobs per destination."""


DisplayMode = Union[DetailMode, TotalsMode]


def display_mode_from_flags(*, show_content: bool, show_properties: bool, show_totals: bool) -> DisplayMode:
    # Totals wins over the detail flags instead of rejecting the combination.
    if show_totals:
        return TotalsMode()
    return DetailMode(show_content=show_content, show_properties=show_properties)


__all__ = ["DetailMode", "DisplayMode", "TotalsMode", "display_mode_from_flags"]
