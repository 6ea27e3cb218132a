"""Renderers and the site builder for playground books."""

from .formats import HtmlPageRenderer, PageRenderer, TextPageRenderer, get_renderer
from .link_rewriter import PageLinkExtension
from .models import PageModel
from .renderer import HtmlContentRenderer
from .site_builder import BuildReport, SiteBuilder

__all__ = [
    "BuildReport",
    "HtmlContentRenderer",
    "HtmlPageRenderer",
    "PageLinkExtension",
    "PageModel",
    "PageRenderer",
    "SiteBuilder",
    "TextPageRenderer",
    "get_renderer",
]
