"""Name -> id resolution against the content store and the reference cache."""

from __future__ import annotations

from .deck import DeckResolver
from .model import ModelResolver

__all__ = ["DeckResolver", "ModelResolver"]
