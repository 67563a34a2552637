"""
Request-scoped page sessions.

Every render request gets its own browser context and page, configured from the
request's `PageOptions` and navigated to the target URL. `page_session` is the
only way the renderer acquires a page: it guarantees the page is closed on every
exit path, and that a failure while closing never replaces the error that
aborted the request.
"""
import enum
import json
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from playwright.async_api import Browser, BrowserContext, CDPSession, Page
from playwright.async_api import Error as PlaywrightError

from headless_renderer.components.renderer.engine import EngineHandle
from headless_renderer.components.renderer.options import Credentials, PageOptions
from headless_renderer.core.exceptions import (
    BadOptionsError,
    CaptureError,
    CloseError,
    NavigationError,
    RendererError,
)
from headless_renderer.core.logger import get_logger

logger = get_logger(__name__)


class SessionState(enum.Enum):
    IDLE = "idle"
    PAGE_OPEN = "page_open"
    CONFIGURED = "configured"
    NAVIGATED = "navigated"
    OUTPUT_EXTRACTED = "output_extracted"
    ERRORED = "errored"
    CLOSED = "closed"


def parse_headers(headers: str) -> Dict[str, str]:
    """
    Parses the JSON-encoded `headers` option into a header mapping.

    Values must be JSON strings, numbers or booleans; numbers and booleans are
    sent as their string form (`2` -> "2", `true` -> "True").

    Raises:
        BadOptionsError: If `headers` is not valid JSON, not a JSON object, or
            has a null, object or array value.
    """
    try:
        parsed = json.loads(headers)
    except json.JSONDecodeError as e:
        raise BadOptionsError("Invalid JSON in 'headers' option", e) from e
    if not isinstance(parsed, dict):
        raise BadOptionsError(f"'headers' option must be a JSON object, got {type(parsed).__name__}")

    parsed_headers: Dict[str, str] = {}
    for name, value in parsed.items():
        if value is None or isinstance(value, (dict, list)):
            raise BadOptionsError(
                f"Header '{name}' in 'headers' option must be a string, number or boolean, got {type(value).__name__}"
            )
        parsed_headers[str(name)] = str(value)
    return parsed_headers


class PageSession:
    """
    One browser page bound to one render request.

    A session moves through `SessionState` in order: IDLE -> PAGE_OPEN ->
    CONFIGURED -> NAVIGATED -> OUTPUT_EXTRACTED -> CLOSED, or to ERRORED from
    any open state, and then always to CLOSED.
    """

    def __init__(self, browser: Browser, url: str):
        self.browser = browser
        self.url = url
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.state = SessionState.IDLE
        self.crashed = False
        self._cdp: Optional[CDPSession] = None

    def _on_crash(self, page: Page) -> None:
        self.crashed = True
        logger.error(f"Page crashed while rendering '{self.url}'.")

    async def open(self, credentials: Optional[Credentials] = None) -> None:
        # Playwright binds basic auth to the browser context, so credentials are
        # handed over when the session's context is created.
        context_kwargs = {}
        if credentials is not None:
            context_kwargs["http_credentials"] = {
                "username": credentials.username,
                "password": credentials.password,
            }
        try:
            self.context = await self.browser.new_context(**context_kwargs)
            self.page = await self.context.new_page()
        except PlaywrightError as e:
            raise RendererError(f"Failed to open a page for '{self.url}'", e) from e

        self.page.on("crash", self._on_crash)
        self.state = SessionState.PAGE_OPEN
        logger.debug(f"Opened page for '{self.url}'.")

    async def configure(self, page_options: PageOptions) -> None:
        """
        Applies request-scoped settings in a fixed order: extra headers, media
        emulation, then a disabled HTTP cache. Credentials were applied by `open`.

        Raises:
            BadOptionsError: If the `headers` option cannot be parsed.
        """
        page = self.page
        try:
            if page_options.headers:
                await page.set_extra_http_headers(parse_headers(page_options.headers))
            if page_options.emulate_media_type:
                await page.emulate_media(media=page_options.emulate_media_type)

            # Every request must hit the network; cached responses would leak
            # stale content into PDFs and screenshots.
            self._cdp = await self.context.new_cdp_session(page)
            await self._cdp.send("Network.enable")
            await self._cdp.send("Network.setCacheDisabled", {"cacheDisabled": True})
        except PlaywrightError as e:
            raise RendererError(f"Failed to configure page for '{self.url}'", e) from e

        self.state = SessionState.CONFIGURED

    async def navigate(self, page_options: PageOptions) -> None:
        """
        Raises:
            NavigationError: If navigation fails or times out, or the page crashes while loading.
        """
        try:
            await self.page.goto(self.url, **page_options.navigation_options())
        except PlaywrightError as e:
            logger.error(f"Navigation to '{self.url}' failed: {e}")
            raise NavigationError(self.url, e) from e
        if self.crashed:
            raise NavigationError(self.url)
        self.state = SessionState.NAVIGATED

    async def close(self) -> None:
        """
        Closes the page and its context if still open. Never raises: close
        failures are logged and discarded.
        """
        if self.page is not None:
            try:
                if not self.page.is_closed():
                    await self.page.close()
            except Exception as e:
                logger.warning(str(CloseError(f"Failed to close page for '{self.url}'", e)))
        if self.context is not None:
            try:
                await self.context.close()
            except Exception as e:
                logger.warning(str(CloseError(f"Failed to close browser context for '{self.url}'", e)))
        self.state = SessionState.CLOSED
        logger.debug(f"Closed page for '{self.url}'.")


@asynccontextmanager
async def page_session(engine: EngineHandle, url: str, page_options: PageOptions) -> AsyncIterator[PageSession]:
    """
    Opens, configures and navigates a page for one request, and closes it on exit.

    Usage::

        async with page_session(engine, url, page_options) as session:
            html = await session.page.content()

    Args:
        engine (EngineHandle): The shared browser engine.
        url (str): The URL to load.
        page_options (PageOptions): Headers, media type, credentials and navigation options.

    Yields:
        PageSession: The navigated session; use `session.page` to extract output.

    Raises:
        BadOptionsError: If the headers option is malformed.
        NavigationError: If the page cannot be loaded.
        CaptureError: If the page crashed while the body was extracting output.
    """
    session = PageSession(engine.browser, url)
    try:
        await session.open(page_options.credentials)
        await session.configure(page_options)
        await session.navigate(page_options)
        yield session
        if session.crashed:
            raise CaptureError(url, "output")
        session.state = SessionState.OUTPUT_EXTRACTED
    except BaseException:
        if session.page is not None:
            session.state = SessionState.ERRORED
        raise
    finally:
        await session.close()
