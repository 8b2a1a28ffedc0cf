"""Mini README: Core package initializer for the deposit board.

The board tracks cumulative deposits for a small group, streams live state
to browser dashboards and exposes a compact admin surface. This module keeps
imports light so the components can be used without the web stack.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
