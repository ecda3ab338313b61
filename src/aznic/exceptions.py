"""Exception hierarchy for aznic.

Helpers raise; only the workflow driver and the CLI decide what to do
(cleanup, exit status). Nothing below terminates the process.
"""


class AznicError(Exception):
    """Base exception for all aznic errors."""

    pass


class ConfigError(AznicError):
    """Invalid configuration or missing environment variables."""

    pass


class ProvisioningError(AznicError):
    """A remote management call failed.

    Attributes:
        label: Short description of the operation that failed
        cause: Original exception raised by the Azure SDK (if any)
    """

    def __init__(self, label: str, cause: BaseException | str | None = None):
        self.label = label
        self.cause = cause
        if cause is None:
            message = label
        else:
            message = f"{label}: {cause}"
        super().__init__(message)


class AuthenticationError(ProvisioningError):
    """Credential creation or token acquisition failed."""

    pass


class InterfaceNotFoundError(ProvisioningError):
    """A network interface looked up by name does not exist locally."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        known = ", ".join(available) if available else "none"
        super().__init__(f"Network interface '{name}' not found (known: {known})")


__all__ = [
    "AuthenticationError",
    "AznicError",
    "ConfigError",
    "InterfaceNotFoundError",
    "ProvisioningError",
]
