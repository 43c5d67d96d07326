"""Server-rendered HTML pages."""

from onetime_access.pages.root import render_root_page

__all__ = ["render_root_page"]
