import pytest
from unittest.mock import AsyncMock, DEFAULT, MagicMock

from headless_renderer.components.renderer.engine import EngineHandle


class FakeEngine:
    """
    Stand-in for a launched browser: every `new_context()` call yields a fresh
    context/page pair built from MagicMock/AsyncMock, and every page interaction
    is appended to `calls` so tests can assert ordering.
    """

    def __init__(self):
        self.calls = []
        self.contexts = []
        self.pages = []
        self.cdp_sessions = []
        self.browser = MagicMock()
        self.browser.new_context = AsyncMock(side_effect=self._new_context)
        self.playwright = MagicMock()
        self.playwright.stop = AsyncMock()
        self.browser.close = AsyncMock()
        self.handle = EngineHandle(self.playwright, self.browser)
        # Optional callable(page, context) run on every new page, used to inject failures.
        self.on_new_page = None

    def _recorder(self, name, return_value=None):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return DEFAULT
        return AsyncMock(side_effect=record, return_value=return_value)

    def _new_context(self, **kwargs):
        self.calls.append(("new_context", (), kwargs))

        page = MagicMock()
        page.is_closed.return_value = False
        page.set_extra_http_headers = self._recorder("set_extra_http_headers")
        page.emulate_media = self._recorder("emulate_media")
        page.goto = self._recorder("goto")
        page.content = self._recorder("content", "<!DOCTYPE html><html><body><h1>Example Domain</h1></body></html>")
        page.pdf = self._recorder("pdf", b"%PDF-1.4 fake document")
        page.screenshot = self._recorder("screenshot", b"\x89PNG fake image")
        page.set_viewport_size = self._recorder("set_viewport_size")
        page.close = self._recorder("page.close")

        cdp = MagicMock()
        cdp.send = self._recorder("cdp.send")

        context = MagicMock()
        context.new_page = AsyncMock(return_value=page)
        context.new_cdp_session = AsyncMock(return_value=cdp)
        context.close = self._recorder("context.close")

        if self.on_new_page is not None:
            self.on_new_page(page, context)

        self.pages.append(page)
        self.contexts.append(context)
        self.cdp_sessions.append(cdp)
        return context

    @property
    def page(self):
        return self.pages[-1]

    @property
    def context(self):
        return self.contexts[-1]

    def call_names(self):
        return [name for name, _, _ in self.calls]

    def crash_handler(self, page=None):
        """Returns the listener the session registered for the page's 'crash' event."""
        page = page or self.page
        for call in page.on.call_args_list:
            if call.args[0] == "crash":
                return call.args[1]
        raise AssertionError("no crash listener registered")


@pytest.fixture
def fake_engine():
    return FakeEngine()
