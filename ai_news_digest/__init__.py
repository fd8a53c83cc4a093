"""Fetch AI news from blogs and GitHub and render a localized digest."""

__version__ = "0.1.0"
