import pytest
from pydantic import ValidationError

from headless_renderer.components.renderer.options import (
    PageOptions,
    PageViewportOptions,
    PdfOptions,
    ScreenshotOptions,
)


def test_page_options_defaults():
    options = PageOptions()
    assert options.navigation_options() == {"wait_until": "networkidle", "timeout": 30000}
    assert options.headers is None
    assert options.emulate_media_type is None
    assert options.credentials is None


def test_page_options_reject_unknown_media_type():
    with pytest.raises(ValidationError):
        PageOptions(emulate_media_type="tv")


def test_viewport_defaults():
    assert PageViewportOptions().as_viewport() == {"width": 800, "height": 600}


def test_pdf_kwargs_skip_unset_fields():
    assert PdfOptions().pdf_kwargs() == {}
    assert PdfOptions(landscape=True, page_ranges="1-2").pdf_kwargs() == {"landscape": True, "page_ranges": "1-2"}


@pytest.mark.parametrize("screenshot_type, expects_quality", [("png", False), ("jpeg", True)])
def test_quality_only_for_lossy_formats(screenshot_type, expects_quality):
    kwargs = ScreenshotOptions(type=screenshot_type, quality=60).capture_kwargs()

    assert kwargs["type"] == screenshot_type
    assert ("quality" in kwargs) is expects_quality
    assert "animation_timeout" not in kwargs


def test_screenshot_rejects_out_of_range_quality():
    with pytest.raises(ValidationError):
        ScreenshotOptions(type="jpeg", quality=101)
