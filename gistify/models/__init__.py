"""Data models."""

from gistify.models.snippet import SnippetRecord

__all__ = ["SnippetRecord"]
