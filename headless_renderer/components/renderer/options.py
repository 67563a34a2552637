"""
Option structures accepted by the renderer.

These pydantic models describe one render request: how the page is loaded
(`PageOptions`), and what is produced from it (`PdfOptions`, or
`PageViewportOptions` + `ScreenshotOptions`). Field names follow the keyword
arguments of the Playwright calls they feed.
"""
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Screenshot formats that accept a `quality` setting.
LOSSY_FORMATS = frozenset({"jpeg"})

WaitUntil = Literal["load", "domcontentloaded", "networkidle", "commit"]
MediaType = Literal["screen", "print"]
ScreenshotType = Literal["png", "jpeg"]


class Credentials(BaseModel):
    """HTTP basic-auth credentials for the target site."""
    model_config = ConfigDict(extra="forbid")

    username: str
    password: str


class PageOptions(BaseModel):
    """
    Options applied to the page before and during navigation.

    `headers` stays a JSON-encoded string here; it is parsed when the page
    session is configured so that a malformed value fails only that request.
    """
    model_config = ConfigDict(extra="forbid")

    wait_until: WaitUntil = "networkidle"
    timeout: int = Field(default=30000, ge=0, description="Navigation timeout in milliseconds (0 disables it).")
    headers: Optional[str] = None
    emulate_media_type: Optional[MediaType] = None
    credentials: Optional[Credentials] = None

    def navigation_options(self) -> Dict[str, Any]:
        """Keyword arguments for `page.goto`."""
        return {"wait_until": self.wait_until, "timeout": self.timeout}


class PageViewportOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    width: int = Field(default=800, gt=0)
    height: int = Field(default=600, gt=0)

    def as_viewport(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


class PdfMargin(BaseModel):
    model_config = ConfigDict(extra="forbid")

    top: Optional[Union[str, float]] = None
    right: Optional[Union[str, float]] = None
    bottom: Optional[Union[str, float]] = None
    left: Optional[Union[str, float]] = None


class PdfOptions(BaseModel):
    """
    Layout options for print-to-PDF. Unset fields are left to the engine's defaults.
    """
    model_config = ConfigDict(extra="forbid")

    scale: Optional[float] = Field(default=None, ge=0.1, le=2)
    display_header_footer: Optional[bool] = None
    header_template: Optional[str] = None
    footer_template: Optional[str] = None
    print_background: Optional[bool] = None
    landscape: Optional[bool] = None
    page_ranges: Optional[str] = None
    format: Optional[str] = None
    width: Optional[Union[str, float]] = None
    height: Optional[Union[str, float]] = None
    prefer_css_page_size: Optional[bool] = None
    margin: Optional[PdfMargin] = None

    def pdf_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for `page.pdf`, without the fields the caller left unset."""
        return self.model_dump(exclude_none=True)


class ScreenshotOptions(BaseModel):
    """
    Screenshot capture options.

    `quality` only applies to lossy formats and `animation_timeout` (milliseconds)
    controls how long to wait for the page to stop animating; 0 captures at once.
    """
    model_config = ConfigDict(extra="forbid")

    type: ScreenshotType = "png"
    quality: int = Field(default=100, ge=0, le=100)
    full_page: bool = False
    omit_background: bool = False
    animation_timeout: int = Field(default=0, ge=0)

    @property
    def is_lossy(self) -> bool:
        return self.type in LOSSY_FORMATS

    def capture_kwargs(self) -> Dict[str, Any]:
        """
        Keyword arguments for `page.screenshot`.

        `quality` is included for lossy formats only; Playwright rejects it for png.
        """
        kwargs: Dict[str, Any] = {
            "type": self.type,
            "full_page": self.full_page,
            "omit_background": self.omit_background,
        }
        if self.is_lossy:
            kwargs["quality"] = self.quality
        return kwargs
