"""
headless_renderer: render URLs to HTML, PDF or screenshots with a shared headless Chromium.
"""
from .components.renderer import (
    Renderer,
    ScreenshotResult,
    create_renderer,
    Credentials,
    PageOptions,
    PageViewportOptions,
    PdfOptions,
    ScreenshotOptions,
)

__version__ = "0.1.0"

__all__ = [
    "Renderer",
    "ScreenshotResult",
    "create_renderer",
    "Credentials",
    "PageOptions",
    "PageViewportOptions",
    "PdfOptions",
    "ScreenshotOptions",
]
