"""
CLI interface for codex.
"""

from .main import main


__all__ = ["main"]
