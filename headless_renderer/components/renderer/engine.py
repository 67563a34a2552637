"""
Bootstraps the shared headless Chromium engine.

`launch_engine` starts Playwright, launches one headless Chromium process with a
fixed set of isolation and cache switches, and returns an `EngineHandle` that
the renderer keeps for its whole lifetime. Pages for individual requests are
opened against this handle; it is closed once, at shutdown.
"""
import asyncio
import os
import shutil
from typing import Any, Dict, Iterable, List, Optional, Set

import psutil
from playwright.async_api import async_playwright, Browser, Playwright

from headless_renderer.core.exceptions import EngineLaunchError
from headless_renderer.core.logger import get_logger

logger = get_logger(__name__)

# Always appended to the launch arguments. They make Chromium usable inside
# containers and keep its cache from growing across many short-lived pages.
FIXED_ARGS = (
    "--no-sandbox",
    "--disable-web-security",
    "--disable-dev-shm-usage",
    "--disk-cache-size=0",
    "--aggressive-cache-discard",
)

USER_DATA_DIR_PREFIX = "--user-data-dir="


def _switch_name(arg: str) -> str:
    return arg.split("=", 1)[0]


def merge_launch_args(args: Optional[Iterable[str]]) -> List[str]:
    """
    Combines caller-supplied Chromium switches with `FIXED_ARGS`.

    A caller switch naming the same flag as a fixed one is dropped (fixed flags
    always win) and repeated caller switches are kept once, in their original order.

    Args:
        args (Optional[Iterable[str]]): Switches from configuration or the caller.

    Returns:
        List[str]: The caller switches followed by `FIXED_ARGS`.
    """
    fixed_switches = {_switch_name(arg) for arg in FIXED_ARGS}
    merged: List[str] = []
    for arg in args or ():
        if _switch_name(arg) in fixed_switches:
            logger.warning(f"Ignoring launch argument '{arg}': it conflicts with a fixed engine switch.")
            continue
        if arg not in merged:
            merged.append(arg)
    merged.extend(FIXED_ARGS)
    return merged


def _user_data_dirs() -> Set[str]:
    """
    Returns the `--user-data-dir` values found on the command lines of this
    process's descendants (the Playwright driver and the browsers it spawned).
    """
    dirs: Set[str] = set()
    try:
        children = psutil.Process().children(recursive=True)
    except psutil.Error as e:
        logger.debug(f"Could not list child processes: {e}")
        return dirs

    for child in children:
        try:
            cmdline = child.cmdline()
        except psutil.Error:
            # Child exited or is not inspectable; nothing to record for it.
            continue
        for arg in cmdline:
            if arg.startswith(USER_DATA_DIR_PREFIX):
                dirs.add(arg[len(USER_DATA_DIR_PREFIX):])
                break
    return dirs


class EngineHandle:
    """
    The single running browser engine.

    Attributes:
        playwright (Playwright): The Playwright driver that launched the browser.
        browser (Browser): The headless Chromium instance pages are opened on.
        user_data_dir (Optional[str]): Transient profile directory used by the
            browser process, if it could be discovered. Removed on `close()`.
        launch_options (Dict[str, Any]): The effective options the browser was launched with.
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        user_data_dir: Optional[str] = None,
        launch_options: Optional[Dict[str, Any]] = None,
    ):
        self.playwright = playwright
        self.browser = browser
        self.user_data_dir = user_data_dir
        self.launch_options = launch_options or {}

    async def close(self) -> None:
        """
        Closes the browser, stops the Playwright driver and removes the recorded
        transient profile directory. Call exactly once.
        """
        logger.info("Closing browser engine.")
        try:
            await self.browser.close()
        except Exception as e:
            logger.error(f"Error closing browser: {e}", exc_info=True)
        try:
            await self.playwright.stop()
        except Exception as e:
            logger.error(f"Error stopping Playwright: {e}", exc_info=True)

        if self.user_data_dir and os.path.isdir(self.user_data_dir):
            try:
                shutil.rmtree(self.user_data_dir)
                logger.debug(f"Removed transient browser data directory: {self.user_data_dir}")
            except OSError as e:
                logger.error(f"Failed to remove transient browser data directory '{self.user_data_dir}': {e}", exc_info=True)


async def launch_engine(launch_options: Optional[Dict[str, Any]] = None) -> EngineHandle:
    """
    Starts Playwright and launches the shared headless Chromium browser.

    Args:
        launch_options (Optional[Dict[str, Any]]): Keyword arguments for
            `playwright.chromium.launch` (e.g. `args`, `timeout`, `executable_path`).
            `args` is merged with `FIXED_ARGS`; `headless` is always True.

    Returns:
        EngineHandle: Handle wrapping the running browser.

    Raises:
        EngineLaunchError: If Playwright or the browser process fails to start.
    """
    options = dict(launch_options or {})
    options["args"] = merge_launch_args(options.get("args"))
    options["headless"] = True

    known_dirs = await asyncio.to_thread(_user_data_dirs)
    playwright: Optional[Playwright] = None
    try:
        playwright = await async_playwright().start()
        browser = await playwright.chromium.launch(**options)
    except Exception as e:
        logger.error(f"Failed to launch browser engine: {e}", exc_info=True)
        if playwright:
            try:
                await playwright.stop()
            except Exception as stop_e:
                logger.error(f"Error stopping Playwright after failed launch: {stop_e}", exc_info=True)
        raise EngineLaunchError("Failed to launch browser engine", e) from e

    new_dirs = sorted(await asyncio.to_thread(_user_data_dirs) - known_dirs)
    user_data_dir = new_dirs[0] if new_dirs else None

    logger.info(f"Initialized browser engine (chromium {browser.version}). Options: {options}. User data dir: {user_data_dir}")
    return EngineHandle(playwright, browser, user_data_dir=user_data_dir, launch_options=options)
