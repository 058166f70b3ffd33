from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from core.errors import ExpiredToken, InvalidToken


class TokenService:
    """Issues and verifies signed identity tokens.

    The signing secret is handed in at construction so tests can build
    isolated instances; the application builds one from settings.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 expires_delta: timedelta = timedelta(minutes=60)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, subject_id: str, **claims: Any) -> str:
        now = datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.update({
            "sub": str(subject_id),
            "iat": now,
            "exp": now + self.expires_delta,
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Return the subject id carried by a valid token"""
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except ExpiredSignatureError:
            raise ExpiredToken()
        except InvalidTokenError:
            raise InvalidToken()

        subject_id = payload.get("sub")
        if not subject_id:
            raise InvalidToken()
        return subject_id
