"""Translation of service results into HTTP responses.

Success kinds pick the status code; failures are raised as ServiceFailureError
and rendered by the handler registered in api.error_handlers.
"""

from typing import Any, Callable
from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from domain.model.result import Failure, ResultKind, ServiceResult

STATUS_BY_KIND: dict[ResultKind, int] = {
    ResultKind.SUCCESS_WITH_DATA: status.HTTP_200_OK,
    ResultKind.CREATED: status.HTTP_201_CREATED,
    ResultKind.SUCCESS_NO_DATA: status.HTTP_204_NO_CONTENT,
    ResultKind.VALIDATION_FAILURE: status.HTTP_400_BAD_REQUEST,
    ResultKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ResultKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ResultKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ResultKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ResultKind.CONFLICT: status.HTTP_409_CONFLICT,
}


class ServiceFailureError(Exception):
    """Carries a Failure result out of a route handler."""

    def __init__(self, failure: Failure):
        self.failure = failure
        self.status_code = STATUS_BY_KIND[failure.kind]
        super().__init__(failure.message)

    def to_body(self) -> dict:
        return {
            "detail": self.failure.message,
            "status": self.status_code,
            "kind": self.failure.kind.value,
        }


def to_response(result: ServiceResult, render: Callable[[Any], Any] | None = None) -> Response:
    """Build the HTTP response for a service result.

    Args:
        result: Outcome returned by a user service operation
        render: Converts the success payload into a serializable response model

    Raises:
        ServiceFailureError: result is a failure
    """
    if not result.ok:
        raise ServiceFailureError(result)

    status_code = STATUS_BY_KIND[result.kind]
    if result.kind == ResultKind.SUCCESS_NO_DATA or result.payload is None:
        return Response(status_code=status_code)

    content = render(result.payload) if render else result.payload
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))
