"""
Waits for a page to stop animating before a screenshot is taken.

The page is captured repeatedly with the request's screenshot options; two
identical consecutive captures mean that CSS transitions, animations and fades
have finished. The wait is bounded: when the deadline passes the function
returns quietly and the screenshot is taken in whatever state the page is in.
"""
import asyncio
from typing import Optional

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from headless_renderer.components.renderer.options import ScreenshotOptions
from headless_renderer.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 0.1  # seconds


async def wait_for_animations(
    page: Page,
    screenshot_options: ScreenshotOptions,
    timeout_ms: int,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> bool:
    """
    Polls the page's rendering until it is stable or `timeout_ms` elapses.

    Each capture is itself bounded by the time left, so the call returns within
    `timeout_ms` plus at most one capture round-trip. A timeout is not an error.

    Args:
        page (Page): A navigated page.
        screenshot_options (ScreenshotOptions): Options of the screenshot that will follow.
        timeout_ms (int): Maximum time to wait, in milliseconds.
        poll_interval (float): Pause between captures, in seconds.

    Returns:
        bool: True if the page settled, False if the deadline was reached first.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000
    capture_kwargs = screenshot_options.capture_kwargs()
    previous: Optional[bytes] = None
    captures = 0

    while True:
        remaining = deadline - loop.time()
        if remaining <= 0:
            break
        try:
            current = await page.screenshot(**capture_kwargs, timeout=max(remaining * 1000, 1))
        except PlaywrightTimeoutError:
            break
        captures += 1
        if previous is not None and current == previous:
            logger.debug(f"Page settled after {captures} captures.")
            return True
        previous = current
        await asyncio.sleep(min(poll_interval, max(deadline - loop.time(), 0)))

    logger.debug(f"Animation wait timed out after {timeout_ms}ms ({captures} captures); capturing anyway.")
    return False
