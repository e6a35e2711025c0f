"""Borsh codec and type layout resolution."""

from .codec import BorshCodec
from .layout import LayoutInfo, TypeTable, resolve_layout

__all__ = [
    "BorshCodec",
    "LayoutInfo",
    "TypeTable",
    "resolve_layout",
]
