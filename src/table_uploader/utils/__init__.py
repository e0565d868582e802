"""Shared utilities: structured logging and column name normalization."""
