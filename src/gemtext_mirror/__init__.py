"""Mirror a directory tree, rendering Gemtext pages as HTML."""

from .config import AppConfig, load_config
from .core import MirrorService
from .models import Entry, MirrorAction, MirrorError, MirrorSummary
from .parser import convert_bytes, convert_stream

__all__ = [
    "AppConfig",
    "load_config",
    "Entry",
    "MirrorAction",
    "MirrorError",
    "MirrorService",
    "MirrorSummary",
    "convert_bytes",
    "convert_stream",
]
