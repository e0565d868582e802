"""Statement builders."""

from .ctas import CtasBuilder, build_select_rows, format_literal
from .insert import InsertBuilder

__all__ = ["CtasBuilder", "InsertBuilder", "build_select_rows", "format_literal"]
