"""Utility helpers."""

from .urls import escape_html, normalize_target_url, url_origin

__all__ = ["escape_html", "normalize_target_url", "url_origin"]
