from __future__ import annotations

import sys
import traceback
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    CONFIGURATION = "configuration"
    BUSINESS_LOGIC = "business_logic"
    EXTERNAL_SERVICE = "external_service"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    error_id: str
    timestamp: datetime
    error_type: str
    error_message: str
    severity: ErrorSeverity
    category: ErrorCategory
    module: str
    function: str
    line_number: int
    stack_trace: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_id": self.error_id,
            "timestamp": self.timestamp.isoformat(),
            "error_type": self.error_type,
            "error_message": self.error_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "module": self.module,
            "function": self.function,
            "line_number": self.line_number,
            "stack_trace": self.stack_trace,
        }


class BaseApplicationException(Exception):
    severity: ErrorSeverity = ErrorSeverity.ERROR
    category: ErrorCategory = ErrorCategory.UNKNOWN
    user_message: str | None = None

    def __init__(
        self,
        message: str,
        *,
        severity: ErrorSeverity | None = None,
        category: ErrorCategory | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity or self.severity
        self.category = category or self.category
        self.user_message = user_message or self.user_message or message
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        self.error_id = f"ERR-{uuid.uuid4().hex[:12].upper()}"

    def get_context(self) -> ErrorContext:
        frame = sys.exc_info()[2]
        tb = traceback.extract_tb(frame) if frame else []
        location = tb[-1] if tb else None
        return ErrorContext(
            error_id=self.error_id,
            timestamp=self.timestamp,
            error_type=self.__class__.__name__,
            error_message=self.message,
            severity=self.severity,
            category=self.category,
            module=location.filename if location else "unknown",
            function=location.name if location else "unknown",
            line_number=0 if not location or location.lineno is None else location.lineno,
            stack_trace=traceback.format_exc() if frame else None,
        )


class ValidationException(BaseApplicationException):
    severity = ErrorSeverity.WARNING
    category = ErrorCategory.VALIDATION
    user_message = "The provided data is invalid"


class ResourceNotFoundException(BaseApplicationException):
    severity = ErrorSeverity.ERROR
    category = ErrorCategory.BUSINESS_LOGIC
    user_message = "The requested resource was not found"


class ConfigurationException(BaseApplicationException):
    severity = ErrorSeverity.CRITICAL
    category = ErrorCategory.CONFIGURATION


class ConfigurationError(ConfigurationException):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
