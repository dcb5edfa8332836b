"""Error taxonomy shared by providers, operations and routers"""

from __future__ import annotations


class SynapseError(Exception):
    """Base class for backend errors"""


class ProviderError(SynapseError):
    """A provider answered with a non-success HTTP status or an error event"""

    def __init__(self, provider: str, status: int, body: str, error_type: str | None = None):
        self.provider = provider
        self.status = status
        self.body = body
        self.error_type = error_type
        super().__init__(f"{provider} API error ({error_type or status}): {body}")


class ProtocolError(SynapseError):
    """The provider response could not be read as the expected protocol"""


class ConfigurationError(SynapseError):
    """Missing credentials or an invalid provider setup"""


class UnknownProviderError(ConfigurationError):
    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(f"Provider {provider_id} not registered")


class PatchConflictError(SynapseError):
    """The buffer no longer holds the text a patch was built against"""


class PathAccessError(SynapseError, PermissionError):
    """A filesystem path resolves outside the open workspace folder"""
