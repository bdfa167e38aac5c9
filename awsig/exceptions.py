class SigningError(ValueError):
    """Base class for every error raised while preparing a signature."""


class HostHeaderError(SigningError):
    """The caller supplied a ``Host`` header; the signer owns it."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Refusing to sign a request with a caller-supplied Host header ({value!r}); "
            "the Host header is derived from the service endpoint"
        )
        self.value = value


class EndpointError(SigningError):
    """No endpoint can be resolved for the requested service."""


class ConfigError(SigningError):
    """Signing configuration is missing or malformed."""
