"""Command-line remote control for Kodi"""

from kodiremote.commands import CommandDescriptor, CommandRegistry, build_registry, lookup
from kodiremote.errors import (
    ConfigurationError,
    InvalidParametersError,
    KodiRemoteError,
    ProtocolDecodeError,
    RemoteError,
    TransportError,
    UnknownCommandError,
)
from kodiremote.services.config import Configuration, ConfigService
from kodiremote.services.kodi import KodiClient

__version__ = "1.0.0"

__all__ = [
    'CommandDescriptor',
    'CommandRegistry',
    'ConfigService',
    'Configuration',
    'ConfigurationError',
    'InvalidParametersError',
    'KodiClient',
    'KodiRemoteError',
    'ProtocolDecodeError',
    'RemoteError',
    'TransportError',
    'UnknownCommandError',
    'build_registry',
    'lookup',
]
