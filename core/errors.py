from fastapi import status


class BloglistError(Exception):
    """Base class for errors translated to an HTTP response at the API boundary"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BloglistError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid data"


class MalformedIdentifier(BloglistError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "malformatted id"


class NotFound(BloglistError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "resource not found"


class Unauthorized(BloglistError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "operation not permitted"


class InvalidToken(Unauthorized):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "token invalid"


class ExpiredToken(Unauthorized):
    default_message = "token expired"


class InvalidCredentials(Unauthorized):
    default_message = "invalid username or password"
