"""
Renderer component for the headless renderer.

This sub-package drives a shared headless Chromium (through Playwright) to turn
URLs into HTML, PDF documents or screenshots, opening an isolated page for
every request and closing it again on every exit path.
"""
from .engine import EngineHandle, FIXED_ARGS, launch_engine
from .options import (
    Credentials,
    PageOptions,
    PageViewportOptions,
    PdfMargin,
    PdfOptions,
    ScreenshotOptions,
)
from .page_session import PageSession, SessionState, page_session
from .animation import wait_for_animations
from .renderer import Renderer, ScreenshotResult, create_renderer

__all__ = [
    # Engine
    "EngineHandle",
    "FIXED_ARGS",
    "launch_engine",
    # Options
    "Credentials",
    "PageOptions",
    "PageViewportOptions",
    "PdfMargin",
    "PdfOptions",
    "ScreenshotOptions",
    # Page lifecycle
    "PageSession",
    "SessionState",
    "page_session",
    "wait_for_animations",
    # Facade
    "Renderer",
    "ScreenshotResult",
    "create_renderer",
]
