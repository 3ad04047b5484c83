"""Structured logging package."""

from ynab_mcp.audit.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
