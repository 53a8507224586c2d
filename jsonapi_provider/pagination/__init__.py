"""Page composers for JSON:API pagination strategies."""

from .base import PageComposer
from .standard import (
    CursorPage,
    CursorPageComposer,
    OffsetPage,
    OffsetPageComposer,
    PageNumberComposer,
    PageNumberPage,
)

__all__ = [
    "CursorPage",
    "CursorPageComposer",
    "OffsetPage",
    "OffsetPageComposer",
    "PageComposer",
    "PageNumberComposer",
    "PageNumberPage",
]
