"""
Mapping of service-layer errors to HTTP responses.
"""
from fastapi import HTTPException, status

from services.exceptions import BusinessRuleError, DeletionBlockedError, EntityNotFoundError


def http_error(error: ValueError) -> HTTPException:
     """
     Translate a service error into the HTTPException the API returns.

     - EntityNotFoundError -> 404
     - DeletionBlockedError, BusinessRuleError -> 409
     - any other ValueError -> 400
     """
     if isinstance(error, EntityNotFoundError):
          return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
     if isinstance(error, (DeletionBlockedError, BusinessRuleError)):
          return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
     return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
