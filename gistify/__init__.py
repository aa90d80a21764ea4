"""Synchronize local text files to GitHub Gists."""

__version__ = "0.1.0"
