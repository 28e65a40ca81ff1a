"""Signing credentials.

Credentials can be passed explicitly or resolved from a boto3 session, which
walks the usual provider chain (environment variables, shared config and
credential files, container and instance roles).
"""

import boto3
from pydantic import BaseModel, ConfigDict, SecretStr

from dynamowire.exceptions import MissingCredentialsError


class Credentials(BaseModel):
    """An access key pair, with an optional session token.

    The secret parts are SecretStr so they do not show up in reprs or logs.
    """

    model_config = ConfigDict(frozen=True)

    access_key: str
    secret_key: SecretStr
    session_token: SecretStr | None = None

    @classmethod
    def from_session(cls, session: boto3.Session | None = None) -> "Credentials":
        """Resolve credentials from a boto3 session.

        Raises:
            MissingCredentialsError: If the session has no credentials.

        """
        session = session or boto3.Session()
        resolved = session.get_credentials()
        if resolved is None:
            raise MissingCredentialsError()

        frozen = resolved.get_frozen_credentials()
        return cls(
            access_key=frozen.access_key,
            secret_key=SecretStr(frozen.secret_key),
            session_token=SecretStr(frozen.token) if frozen.token else None,
        )


__all__ = [
    "Credentials",
]
