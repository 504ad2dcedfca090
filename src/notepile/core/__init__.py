"""Toolkit-independent rendering, measurement and layout engine."""

from .engine import RenderEngine
from .layout import LayoutPolicy
from .model import HeightSignal, NoteRecord, RenderEntry

__all__ = [
    "RenderEngine",
    "LayoutPolicy",
    "HeightSignal",
    "NoteRecord",
    "RenderEntry",
]
