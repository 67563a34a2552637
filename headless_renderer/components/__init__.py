"""
Components sub-package for the headless renderer.

The `__all__` variable defines the public API of this sub-package,
making key components directly importable from `headless_renderer.components`.
"""

from .renderer import (
    Renderer,
    ScreenshotResult,
    create_renderer,
    PageOptions,
    PageViewportOptions,
    PdfOptions,
    ScreenshotOptions,
)

__all__ = [
    "Renderer",
    "ScreenshotResult",
    "create_renderer",
    "PageOptions",
    "PageViewportOptions",
    "PdfOptions",
    "ScreenshotOptions",
]
