"""
JSON Request Body Decoding

Endpoints that accept a body decode it here instead of relying on FastAPI's
implicit body parsing, so each failure maps to a specific API error:

- Content-Type other than application/json -> UNSUPPORTED
- Body larger than MAX_REQUEST_BODY_SIZE -> PAYLOAD_TOO_LARGE
- Empty body, malformed JSON, trailing data, unknown or mistyped fields,
  missing fields -> BAD_REQUEST
"""

from typing import TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from shortener.core.exceptions import (
    InvalidInputError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json"


async def read_limited_body(request: Request, max_size: int) -> bytes:
    """Read the request body, failing as soon as it exceeds ``max_size`` bytes."""
    too_large = PayloadTooLargeError(
        "request-payload-too-large",
        f"Request body must not be larger than {max_size} bytes.",
    )

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_size:
        raise too_large

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_size:
            raise too_large
    return bytes(body)


def _validation_error_to_api_error(exc: ValidationError) -> InvalidInputError:
    error = exc.errors()[0]
    error_type = error["type"]
    field = ".".join(str(part) for part in error["loc"])

    if error_type == "json_invalid":
        return InvalidInputError(
            "json-syntax-error",
            f"Request body contains badly-formed JSON: {error['msg']}.",
        )
    if error_type == "extra_forbidden":
        return InvalidInputError(
            "unknown-field",
            f"Request body contains unknown field \"{field}\".",
        )
    if error_type == "missing":
        return InvalidInputError(
            "missing-field",
            f"Request body is missing the \"{field}\" field.",
        )
    if error_type == "model_type":
        return InvalidInputError(
            "invalid-json-object",
            "Request body must be a single JSON object.",
        )
    return InvalidInputError(
        "invalid-field-value",
        f"Request body contains an invalid value for the \"{field}\" field.",
    )


async def decode_json(request: Request, model: type[ModelT], max_size: int) -> ModelT:
    """
    Decode the JSON body of ``request`` into ``model``.

    Raises:
        UnsupportedMediaTypeError: If the Content-Type is not JSON
        PayloadTooLargeError: If the body exceeds max_size bytes
        InvalidInputError: If the body is empty or does not match the model
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != JSON_CONTENT_TYPE:
        raise UnsupportedMediaTypeError(
            "incorrect-content-header",
            "Content-Type header is not application/json.",
            action='Ensure the Content-Type header is "application/json".',
        )

    body = await read_limited_body(request, max_size)
    if not body.strip():
        raise InvalidInputError("no-empty-requests", "Request body must not be empty.")

    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise _validation_error_to_api_error(e) from e
