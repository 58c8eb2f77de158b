class AppError(Exception):
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} '{resource_id}' not found", code="NOT_FOUND")


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ProviderError(AppError):
    """An upstream provider could not produce a usable result."""

    def __init__(self, provider: str, message: str, code: str = "PROVIDER_ERROR"):
        self.provider = provider
        super().__init__(f"{provider}: {message}", code=code)


class TransportError(ProviderError):
    """Network failure or non-2xx HTTP status."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="TRANSPORT_ERROR")


class ShapeError(ProviderError):
    """2xx response missing the expected field path, or an empty result set."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="SHAPE_ERROR")


class DecodeError(ProviderError):
    """Text that should have been JSON failed to parse."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="DECODE_ERROR")


class ConfigurationError(ProviderError):
    """A credential required by the provider is not configured."""

    def __init__(self, provider: str, message: str):
        super().__init__(provider, message, code="CONFIGURATION_ERROR")
