"""Sign Response Parsing - turns a success envelope into a SignResponse.

Invariants:
    - statusCode is taken from the transport status, never trusted from the body
    - A success body that is not a JSON object, or whose fields have the wrong
      types, raises RemoteFailure.invalid_response; pydantic errors never escape
"""

import pydantic

from fne.core.errors import RemoteFailure
from fne.core.models import SignResponse
from fne.infrastructure.response import ResponseEnvelope


def to_sign_response(envelope: ResponseEnvelope) -> SignResponse:
    body = envelope.as_json()
    if not isinstance(body, dict):
        raise RemoteFailure.invalid_response(envelope.status_code, envelope.body)
    try:
        return SignResponse.from_api(body, envelope.status_code)
    except pydantic.ValidationError as e:
        err = RemoteFailure.invalid_response(envelope.status_code, envelope.body)
        err.context.debug_info["validation_errors"] = [
            f"{'.'.join(str(p) for p in detail['loc'])}: {detail['msg']}"
            for detail in e.errors()
        ]
        raise err from e
