"""
Decoder for inbound request descriptions.
"""

from pydantic import ValidationError

from shared.errors import MalformedInput

from .models import RequestDescription


def decode_request(raw: bytes) -> RequestDescription:
    """Parse a JSON request body into a RequestDescription.

    Raises MalformedInput when the body is not a JSON object or the ``url``
    field is missing, empty or not an absolute http(s) URL.
    """
    try:
        return RequestDescription.model_validate_json(raw)
    except ValidationError as exc:
        errors = [
            {"loc": list(error.get("loc", ())), "type": error.get("type"), "msg": error.get("msg")}
            for error in exc.errors()
        ]
        raise MalformedInput(
            "Request body is not a valid request description",
            details={"errors": errors},
        ) from exc
