class ProviderError(Exception):
    """Base error for a failed provider call."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"[{source}] {message}")
        self.source = source


class ProviderTimeoutError(ProviderError):
    pass


class ProviderRateLimitError(ProviderError):
    pass


class ProviderHTTPError(ProviderError):
    def __init__(self, source: str, status_code: int, message: str = "") -> None:
        super().__init__(source, f"HTTP {status_code} {message}".strip())
        self.status_code = status_code


class ProviderPayloadError(ProviderError):
    """Response body could not be parsed into the expected shape."""


class ProviderEmptyError(ProviderError):
    """Provider answered but had nothing for the subject."""


class UnsupportedCapabilityError(ProviderError):
    pass
