"""Debug utilities for automation."""

from .artifacts import DebugArtifactWriter, frame_map

__all__ = ["DebugArtifactWriter", "frame_map"]
