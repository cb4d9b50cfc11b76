from .auth import AccessToken
from .client import SmartObjectsClient
from .config_types import BackoffConfig, ClientConfig, CompressionConfig
from .errors import (
    ApiError,
    AuthError,
    ConfigError,
    NetworkError,
    PlatformUnavailableError,
    SerializationError,
    SmartObjectsError,
)
from .transport import RequestDescriptor

__all__ = [
    "SmartObjectsClient",
    "ClientConfig",
    "CompressionConfig",
    "BackoffConfig",
    "AccessToken",
    "RequestDescriptor",
    "SmartObjectsError",
    "ConfigError",
    "NetworkError",
    "SerializationError",
    "ApiError",
    "AuthError",
    "PlatformUnavailableError",
]
