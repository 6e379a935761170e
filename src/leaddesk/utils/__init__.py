"""
Utility functions and helpers
"""
from leaddesk.utils.logging import get_logger, app_logger, get_shared_logger

__all__ = ["get_logger", "app_logger", "get_shared_logger"]