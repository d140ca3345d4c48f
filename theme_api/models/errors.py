"""Error models for the generation pipeline"""

from enum import Enum
from typing import Optional
import uuid


class ErrorCode(str, Enum):
    """Error codes surfaced to callers"""
    NO_RESPONSE = "NO_RESPONSE"
    PARSE_ERROR = "PARSE_ERROR"
    SEARCH_EXHAUSTED = "SEARCH_EXHAUSTED"
    DEPENDENCY_NOT_READY = "DEPENDENCY_NOT_READY"
    MAX_RETRIES_EXCEEDED = "MAX_RETRIES_EXCEEDED"
    STEP_FAILED = "STEP_FAILED"
    UNKNOWN_STEP = "UNKNOWN_STEP"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"


class ApplicationError(Exception):
    """Base error carrying a code, a human-readable message and retry hints"""

    code: ErrorCode = ErrorCode.STEP_FAILED
    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        retryable: Optional[bool] = None,
        hint: Optional[str] = None,
        step: Optional[str] = None,
    ):
        self.error_id = str(uuid.uuid4())
        if code is not None:
            self.code = code
        if retryable is not None:
            self.retryable = retryable
        self.message = message
        self.hint = hint
        self.step = step
        super().__init__(self.message)

    def model_dump(self):
        """Return dict representation for API responses"""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "message": self.message,
            "hint": self.hint,
            "retryable": self.retryable,
            "step": self.step,
        }

    @property
    def http_status(self) -> int:
        """Map error code to HTTP status"""
        mapping = {
            ErrorCode.UNKNOWN_STEP: 400,
            ErrorCode.UNAUTHORIZED: 401,
            ErrorCode.NOT_FOUND: 404,
            ErrorCode.DEPENDENCY_NOT_READY: 409,
            ErrorCode.NO_RESPONSE: 502,
            ErrorCode.PARSE_ERROR: 502,
            ErrorCode.SEARCH_EXHAUSTED: 502,
            ErrorCode.MAX_RETRIES_EXCEEDED: 502,
            ErrorCode.STEP_FAILED: 500,
            ErrorCode.CONFIGURATION_ERROR: 500,
        }
        return mapping.get(self.code, 500)


class NoResponseError(ApplicationError):
    """Completion capability returned an empty or missing body"""
    code = ErrorCode.NO_RESPONSE
    retryable = True


class ParseError(ApplicationError):
    """Response was not valid JSON or did not match the expected shape"""
    code = ErrorCode.PARSE_ERROR
    retryable = True


class SearchExhaustedError(ApplicationError):
    """Photo search returned fewer than two candidates"""
    code = ErrorCode.SEARCH_EXHAUSTED
    retryable = True


class DependencyNotReadyError(ApplicationError):
    """A step was requested before the slots it depends on were populated"""
    code = ErrorCode.DEPENDENCY_NOT_READY


class MaxRetriesExceededError(ApplicationError):
    """Retry wrapper finished without a single successful attempt"""
    code = ErrorCode.MAX_RETRIES_EXCEEDED
    retryable = True


class StepFailedError(ApplicationError):
    """A pipeline step failed and the failure was surfaced to the orchestrator"""
    code = ErrorCode.STEP_FAILED
    retryable = True


class UnknownStepError(ApplicationError):
    """Step name is not part of the pipeline"""
    code = ErrorCode.UNKNOWN_STEP


class ConfigurationError(ApplicationError):
    """Required configuration (API keys, endpoints) is missing"""
    code = ErrorCode.CONFIGURATION_ERROR
