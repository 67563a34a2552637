"""
Custom exception classes for the headless renderer.
"""
from typing import Optional


class HeadlessRendererError(Exception):
    """
    Base class for all custom exceptions in the headless renderer.

    Attributes:
        message (str): A human-readable description of the error.
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"


# --- Configuration Related Exceptions ---
class ConfigurationError(HeadlessRendererError):
    """
    Raised for errors related to application configuration, such as a
    `renderer.launch_options` section holding values of the wrong type.
    """
    def __init__(self, message: str):
        super().__init__(message)


# --- Component Related Exceptions ---
class ComponentError(HeadlessRendererError):
    """
    A general base class for errors originating from within a specific component.

    Attributes:
        component_name (str): Name of the component where the error originated.
    """
    def __init__(self, component_name: str, message: str):
        full_message = f"Error in component '{component_name}': {message}"
        super().__init__(full_message)
        self.component_name = component_name


class RendererError(ComponentError):
    """Base class for errors raised by the Renderer component."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        self.original_exception = original_exception
        if original_exception is not None:
            message = f"{message}: {original_exception}"
        super().__init__(component_name="Renderer", message=message)


class EngineLaunchError(RendererError):
    """Raised when the browser engine process fails to start. Fatal; never retried."""


class BadOptionsError(RendererError):
    """Raised when request options cannot be applied (e.g. malformed header JSON)."""


class NavigationError(RendererError):
    """
    Raised when navigating a page to the target URL fails (timeout, DNS error,
    or the page crashing while it loads).

    Attributes:
        url (str): The URL that could not be loaded.
    """
    def __init__(self, url: str, original_exception: Optional[Exception] = None):
        self.url = url
        super().__init__(f"Failed to navigate to '{url}'", original_exception)


class CaptureError(RendererError):
    """
    Raised when extracting output (HTML content, PDF or screenshot) from a
    loaded page fails.

    Attributes:
        url (str): The URL whose output could not be captured.
        output_type (str): One of 'html', 'pdf' or 'screenshot'.
    """
    def __init__(self, url: str, output_type: str, original_exception: Optional[Exception] = None):
        self.url = url
        self.output_type = output_type
        super().__init__(f"Failed to capture {output_type} for '{url}'", original_exception)


class CloseError(RendererError):
    """
    Failure while closing a page session. Only ever logged by the page
    lifecycle code, never raised to callers.
    """
