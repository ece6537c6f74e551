"""Formatting helpers shared by the CLI and statistics."""

from .convert_utils import ConvertUtils

__all__ = ["ConvertUtils"]
