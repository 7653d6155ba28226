"""Output layer: trace export and playback."""

from .exporter import ExportOptions, TraceExporter
from .playback import PlaybackView, TracePlayer, view_at

__all__ = ["ExportOptions", "TraceExporter", "PlaybackView", "TracePlayer", "view_at"]
