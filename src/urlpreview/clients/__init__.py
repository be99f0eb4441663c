"""Client abstractions."""

from .browser import BrowserSession
from .http import create_http_client, fetch_document, probe

__all__ = ["BrowserSession", "create_http_client", "fetch_document", "probe"]
