from typing import List, Optional


class LLMServiceError(Exception):
    """Base exception for LLM services."""
    pass


class LLMAPIError(LLMServiceError):
    """Exception for errors during LLM API calls."""
    pass


class LLMResponseParseError(LLMServiceError):
    """Exception for errors when parsing LLM responses."""
    pass


class MalformedResponseError(LLMResponseParseError):
    """The sanitized model text is not valid JSON."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class SchemaViolationError(LLMResponseParseError):
    """The model JSON parsed but does not satisfy the requested shape."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = list(missing_fields or [])


class AnalysisFailedError(LLMServiceError):
    """The model service call failed; ``cause`` holds the underlying error."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class InvalidAnalysisTypeError(ValueError):
    """Unknown derived-analysis kind."""

    def __init__(self, kind: object):
        super().__init__(f"Invalid analysis type: {kind!r}")
        self.kind = kind


class InvalidAnalysisOptionsError(ValueError):
    """Options missing or invalid for a known derived-analysis kind."""
    pass


class InvalidSessionStateError(RuntimeError):
    """An analysis session was driven through an illegal transition."""
    pass
