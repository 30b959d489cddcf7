"""Exceptions raised by the Kodi remote"""


class KodiRemoteError(Exception):
    """Base class for every error the remote reports to the user.

    ``completed`` and ``repeat_count`` are filled in by the client when the
    error interrupts a repeated command.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.completed = 0
        self.repeat_count = 1


class UnknownCommandError(KodiRemoteError):
    def __init__(self, command: str):
        super().__init__(f'unknown command "{command}", see "help" for a list of commands')
        self.command = command


class InvalidParametersError(KodiRemoteError):
    """The parameters given for a command could not be turned into a request"""


class TransportError(KodiRemoteError):
    """Kodi could not be reached"""


class ProtocolDecodeError(KodiRemoteError):
    """The response body is not a JSON-RPC response"""


class RemoteError(KodiRemoteError):
    """Kodi answered with a non-zero error code"""

    def __init__(self, message: str, code: int, response=None):
        super().__init__(message)
        self.code = code
        self.response = response


class ConfigurationError(KodiRemoteError):
    """The configuration file is unreadable or holds invalid values"""
