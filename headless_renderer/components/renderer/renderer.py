"""
Renders URLs to HTML, PDF or screenshots with a shared headless browser.

This module provides the `Renderer` class, the public entry point of the
package, and `create_renderer`, which launches the browser engine (using the
application's configuration) and wraps it in a `Renderer`.

Each render call opens its own page session on the shared engine, extracts a
single output from it and closes it again, whatever the outcome.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError

from headless_renderer.components.renderer.animation import DEFAULT_POLL_INTERVAL, wait_for_animations
from headless_renderer.components.renderer.engine import EngineHandle, launch_engine
from headless_renderer.components.renderer.options import (
    PageOptions,
    PageViewportOptions,
    PdfOptions,
    ScreenshotOptions,
)
from headless_renderer.components.renderer.page_session import page_session
from headless_renderer.core.exceptions import CaptureError, ConfigurationError
from headless_renderer.core.logger import get_logger

if TYPE_CHECKING:
    from headless_renderer.core.config import ConfigurationManager

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScreenshotResult:
    """
    A captured screenshot.

    Attributes:
        type (str): Image format, 'png' or 'jpeg'.
        buffer (bytes): The encoded image.
    """
    type: str
    buffer: bytes

    @property
    def content_type(self) -> str:
        return f"image/{self.type}"


class Renderer:
    """
    Facade over the shared browser engine.

    Can be used as an async context manager, in which case the engine is
    closed on exit::

        async with await create_renderer(config=config_manager) as renderer:
            html = await renderer.html("https://example.com")

    Attributes:
        engine (EngineHandle): The browser engine every page is opened on.
        animation_poll_interval (float): Seconds between captures while waiting
            for animations to settle.
    """

    def __init__(self, engine: EngineHandle, animation_poll_interval: float = DEFAULT_POLL_INTERVAL):
        self.engine = engine
        self.animation_poll_interval = animation_poll_interval

    async def __aenter__(self) -> 'Renderer':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def html(self, url: str, page_options: Optional[PageOptions] = None) -> str:
        """
        Loads `url` and returns the serialized DOM.

        Raises:
            BadOptionsError: If the headers option is malformed.
            NavigationError: If the page cannot be loaded.
            CaptureError: If the content cannot be read from the page.
        """
        page_options = page_options or PageOptions()
        async with page_session(self.engine, url, page_options) as session:
            try:
                return await session.page.content()
            except PlaywrightError as e:
                if not session.crashed:
                    logger.error(f"Failed to read HTML for '{url}': {e}")
                raise CaptureError(url, "html", e) from e

    async def pdf(
        self,
        url: str,
        page_options: Optional[PageOptions] = None,
        pdf_options: Optional[PdfOptions] = None,
    ) -> bytes:
        """
        Loads `url` and prints it to PDF.

        The page is rendered with the 'print' media type unless
        `page_options.emulate_media_type` says otherwise.

        Raises:
            BadOptionsError: If the headers option is malformed.
            NavigationError: If the page cannot be loaded.
            CaptureError: If PDF generation fails.
        """
        page_options = page_options or PageOptions()
        pdf_options = pdf_options or PdfOptions()
        effective_options = page_options.model_copy(
            update={"emulate_media_type": page_options.emulate_media_type or "print"}
        )
        async with page_session(self.engine, url, effective_options) as session:
            try:
                return await session.page.pdf(**pdf_options.pdf_kwargs())
            except PlaywrightError as e:
                if not session.crashed:
                    logger.error(f"Failed to generate PDF for '{url}': {e}")
                raise CaptureError(url, "pdf", e) from e

    async def screenshot(
        self,
        url: str,
        page_options: Optional[PageOptions] = None,
        viewport_options: Optional[PageViewportOptions] = None,
        screenshot_options: Optional[ScreenshotOptions] = None,
    ) -> ScreenshotResult:
        """
        Loads `url` in a viewport of the requested size and captures it.

        With `screenshot_options.animation_timeout > 0` the capture waits (at most
        that many milliseconds) for the page to stop animating.

        Raises:
            BadOptionsError: If the headers option is malformed.
            NavigationError: If the page cannot be loaded.
            CaptureError: If the viewport cannot be set or the capture fails.
        """
        page_options = page_options or PageOptions()
        viewport_options = viewport_options or PageViewportOptions()
        screenshot_options = screenshot_options or ScreenshotOptions()

        async with page_session(self.engine, url, page_options) as session:
            page = session.page
            try:
                await page.set_viewport_size(viewport_options.as_viewport())
                if screenshot_options.animation_timeout > 0:
                    await wait_for_animations(
                        page,
                        screenshot_options,
                        screenshot_options.animation_timeout,
                        poll_interval=self.animation_poll_interval,
                    )
                buffer = await page.screenshot(**screenshot_options.capture_kwargs())
            except PlaywrightError as e:
                if not session.crashed:
                    logger.error(f"Failed to capture screenshot for '{url}': {e}")
                raise CaptureError(url, "screenshot", e) from e

        return ScreenshotResult(type=screenshot_options.type, buffer=buffer)

    async def close(self) -> None:
        """Closes the engine and removes its transient data directory. Call exactly once."""
        await self.engine.close()


def _launch_options_from_config(config: Optional['ConfigurationManager']) -> Dict[str, Any]:
    if config is None:
        return {}
    configured = config.get("renderer.launch_options", {}) or {}
    if not isinstance(configured, dict):
        raise ConfigurationError("'renderer.launch_options' must be a mapping.")
    return {key: value for key, value in configured.items() if value is not None}


async def create_renderer(
    launch_options: Optional[Dict[str, Any]] = None,
    config: Optional['ConfigurationManager'] = None,
) -> Renderer:
    """
    Launches the browser engine and returns a `Renderer` bound to it.

    Launch options come from `renderer.launch_options` in the configuration,
    overridden key by key by `launch_options`; the two `args` lists are
    concatenated (configuration first).

    Args:
        launch_options (Optional[Dict[str, Any]]): Keyword arguments for the Chromium launch.
        config (Optional[ConfigurationManager]): Configuration to read renderer
            settings from. If None, built-in defaults are used.

    Returns:
        Renderer: A renderer owning the launched engine.

    Raises:
        ConfigurationError: If the renderer configuration is malformed.
        EngineLaunchError: If the browser fails to start.
    """
    options = _launch_options_from_config(config)
    explicit = dict(launch_options or {})

    args = options.get("args") or []
    explicit_args = explicit.pop("args", None) or []
    if not isinstance(args, list) or not isinstance(explicit_args, list):
        raise ConfigurationError("Launch option 'args' must be a list of strings.")
    options.update(explicit)
    options["args"] = [str(arg) for arg in args + explicit_args]

    poll_interval = DEFAULT_POLL_INTERVAL
    if config is not None:
        poll_interval = float(config.get("renderer.animation.poll_interval", DEFAULT_POLL_INTERVAL))

    engine = await launch_engine(options)
    return Renderer(engine, animation_poll_interval=poll_interval)
