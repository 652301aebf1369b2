"""Language-model client errors."""


class LLMError(Exception):
    """Base class for completion failures."""


class LLMTransportError(LLMError):
    """Timeout, connection failure or non-2xx status."""


class LLMResponseError(LLMError):
    """Response envelope could not be parsed or carried no content."""
