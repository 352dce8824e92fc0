"""Session and reset token issuing."""

import secrets

from authgate.config import get_settings


class TokenIssuer:
    """Produces opaque, unguessable tokens from the OS CSPRNG.

    Tokens carry no meaning of their own; mapping one back to a user always
    goes through a store lookup.
    """

    def __init__(self, nbytes: int | None = None) -> None:
        self.nbytes = nbytes if nbytes is not None else get_settings().TOKEN_BYTES

    def issue_session_token(self) -> str:
        return secrets.token_urlsafe(self.nbytes)

    def issue_reset_token(self) -> str:
        return secrets.token_urlsafe(self.nbytes)
