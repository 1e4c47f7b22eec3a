"""
Exception classes for virtual components
Flow: Error occurrence → Classification → Logging → Startup abort or recovery

Error Types:
- ComponentNotFoundError: the requested module does not exist (recoverable,
  triggers virtual component synthesis)
- ComponentLoadError: the module exists but cannot be loaded (fatal)
- ConfigurationError: invalid setup_components options (fatal)
- ApplicationSetupError: the application lifecycle was misused
"""

from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger()


class VirtualComponentsException(Exception):
    """
    Base exception class for the component loading framework.

    Features:
    - Structured error context
    - Optional error codes
    - Logged on creation with the exception type
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        log_level: str = "error",
    ):
        """Initialize base exception."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        getattr(logger, log_level)(
            "Virtual components exception occurred",
            error_type=self.__class__.__name__,
            message=message,
            error_code=error_code,
            details=details,
        )


class ConfigurationError(VirtualComponentsException):
    """Invalid application or discovery configuration."""

    def __init__(self, message: str, option: Optional[str] = None):
        details = {"option": option} if option else {}
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )
        self.option = option


class ComponentNotFoundError(VirtualComponentsException):
    """
    A component module could not be located.

    This is the only load outcome that is not fatal: when it happens for a
    rewritten ancestor component, a virtual component is synthesized instead.
    """

    def __init__(self, component_name: str, missing_module: Optional[str] = None):
        super().__init__(
            message=f"Can't locate component module '{component_name}'",
            error_code="COMPONENT_NOT_FOUND",
            details={"component": component_name, "missing_module": missing_module},
            log_level="debug",
        )
        self.component_name = component_name
        self.missing_module = missing_module or component_name


class ComponentLoadError(VirtualComponentsException):
    """
    A component exists but failed to load or instantiate.

    Raised for syntax errors, missing transitive dependencies, exceptions at
    import time and modules that define no component class. Aborts setup.
    """

    def __init__(self, component_name: str, message: str, cause: Optional[BaseException] = None):
        details = {"component": component_name}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(
            message=message,
            error_code="COMPONENT_LOAD_FAILED",
            details=details,
        )
        self.component_name = component_name
        self.cause = cause


class ApplicationSetupError(VirtualComponentsException):
    """The application was used before setup or set up twice."""

    def __init__(self, message: str, application: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="APPLICATION_SETUP_ERROR",
            details={"application": application} if application else {},
        )
        self.application = application
