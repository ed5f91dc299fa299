"""
Shared utilities for the loader.

Configuration lives in ``graph_loader.utils.config``; it is not re-exported
here because it depends on the graph layer, which itself logs through
``get_logger``.
"""

from .logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
