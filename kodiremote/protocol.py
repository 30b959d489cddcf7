"""JSON-RPC 2.0 wire models for the Kodi control API

Request:
{
    "jsonrpc": "2.0",
    "method": "Player.Seek",
    "params": { ... },      # left out when the command takes no parameters
    "id": 1
}

Error response:
{
    "error": {
        "code": -32602,
        "message": "Invalid params.",
        "data": {
            "message": "Invalid params",
            "method": "GUI.ShowNotification",
            "stack": {"name": "title", "type": "string", "message": "Missing parameter"}
        }
    },
    "id": 1,
    "jsonrpc": "2.0"
}
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from kodiremote.errors import ProtocolDecodeError

JSONRPC_VERSION = "2.0"
REQUEST_ID = 1


class RequestEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: dict[str, Any] | None = None
    id: int = REQUEST_ID

    @classmethod
    def for_method(cls, method: str, params: dict | None = None) -> "RequestEnvelope":
        """Build a request, treating an empty params dict as no params at all"""
        return cls(method=method, params=params or None)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class _ResponseModel(BaseModel):
    """Response part where a JSON null leaves the field at its default"""

    @model_validator(mode="before")
    @classmethod
    def null_means_default(cls, data):
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ErrorStack(_ResponseModel):
    name: str = ""
    type: str = ""
    message: str = ""


class ErrorData(_ResponseModel):
    message: str = ""
    method: str = ""
    stack: ErrorStack = Field(default_factory=ErrorStack)


class RpcError(_ResponseModel):
    code: int = 0
    message: str = ""
    data: ErrorData = Field(default_factory=ErrorData)


class ErrorResponse(_ResponseModel):
    """The part of a Kodi response that tells whether the call failed"""

    error: RpcError | None = None
    id: int | str | None = None
    jsonrpc: str = ""

    @property
    def failed(self) -> bool:
        return self.error is not None and self.error.code != 0


def decode_response(body: bytes | str) -> ErrorResponse:
    """Decode a response body, raising ProtocolDecodeError if it isn't one"""
    try:
        return ErrorResponse.model_validate_json(body)
    except ValidationError as e:
        raise ProtocolDecodeError(f"Could not decode response from Kodi: {_first_error(e)}") from e


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{first['msg']} ({location})"
    return first["msg"]


def describe_error(error: RpcError) -> str:
    """Compose a readable message from the error details Kodi sent back.

    'Invalid params regarding parameter "title" of type "string"'
    """
    data = error.data
    stack = data.stack

    parts = [part for part in (data.message, stack.message) if part]

    subject = []
    if stack.name:
        subject.append(f'parameter "{stack.name}"')
    if stack.type:
        subject.append(f'of type "{stack.type}"')

    if subject and parts:
        parts.append("regarding")
    parts.extend(subject)

    if parts:
        return " ".join(parts)
    if error.message:
        return error.message
    return f"error code {error.code}"
