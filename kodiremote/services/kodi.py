"""Kodi JSON-RPC client"""

import logging

import requests

from kodiremote.commands import DEFAULT_REGISTRY, CommandRegistry, resolve_repeat_count
from kodiremote.errors import KodiRemoteError, ProtocolDecodeError, RemoteError, TransportError
from kodiremote.protocol import RequestEnvelope, decode_response, describe_error
from kodiremote.services.config import Configuration

logger = logging.getLogger(__name__)

HEADERS = {'Content-Type': 'application/json'}


class KodiClient:
    def __init__(self, config: Configuration, registry: CommandRegistry = DEFAULT_REGISTRY):
        self.config = config
        self.registry = registry

    @property
    def url(self) -> str:
        return self.config.base_url

    def build_request(self, command: str, params: list[str]) -> RequestEnvelope:
        """Translate a CLI command and its tokens into a JSON-RPC request"""
        descriptor = self.registry.lookup(command)
        return RequestEnvelope.for_method(descriptor.method, descriptor.build_params(params))

    def execute(self, command: str, params: list[str] | None = None) -> int:
        """Run a CLI command against Kodi.

        Cursor movements are sent as often as their trailing repeat count
        says, one after the other. The first failure stops the sequence.
        Returns the number of requests sent.
        """
        repeat_count, params = resolve_repeat_count(command, params or [])
        payload = self.build_request(command, params).to_json()

        for completed in range(repeat_count):
            try:
                self._send(payload)
            except KodiRemoteError as e:
                e.completed = completed
                e.repeat_count = repeat_count
                if repeat_count > 1:
                    logger.debug("Stopped after %d of %d repeats", completed, repeat_count)
                raise

        return repeat_count

    def _send(self, payload: str) -> None:
        """POST one request to Kodi and check the response for an error"""
        logger.debug("POST %s: %s", self.url, payload)
        try:
            response = requests.post(
                self.url,
                data=payload,
                headers=HEADERS,
                timeout=self.config.timeout,
            )
        except requests.Timeout as e:
            raise TransportError(f'Connection timeout - no answer from {self.url}') from e
        except requests.ConnectionError as e:
            raise TransportError(f'Connection refused - is Kodi running at {self.url}?') from e
        except requests.RequestException as e:
            raise TransportError(f'Could not reach Kodi: {e}') from e

        logger.debug("HTTP %s: %s", response.status_code, response.text)

        try:
            result = decode_response(response.content)
        except ProtocolDecodeError as e:
            if not response.ok:
                raise ProtocolDecodeError(f"{e} (HTTP {response.status_code})") from e
            raise

        if result.failed:
            raise RemoteError(describe_error(result.error), result.error.code, result)
