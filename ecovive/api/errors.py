from fastapi import HTTPException, status

from ecovive.services.errors import EcoViveError, InvalidTransition, NotFound, StorageError, ValidationError


_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (StorageError, status.HTTP_502_BAD_GATEWAY),
)


def http_error(exc: EcoViveError) -> HTTPException:
    """Translate a service-layer error into the matching HTTP response."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
