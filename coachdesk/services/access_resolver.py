import logging
from typing import Optional

from sqlalchemy.orm import Session

from coachdesk.core.exceptions import ForbiddenError, InvalidLinkError, NotFoundError
from coachdesk.core.security import security
from coachdesk.models.client import Client

logger = logging.getLogger(__name__)


class ClientAccessResolver:
    """
    Maps a client link (numeric handle + capability token) to the client.

    This is the only authorization boundary of the client-facing pages; it
    never consults a session or cookie. Both failure modes reach the caller
    as the same ``InvalidLinkError`` so handles cannot be enumerated.
    """

    @staticmethod
    def lookup(db: Session, handle: str, token: Optional[str] = None) -> Client:
        """Raises NotFoundError or ForbiddenError; callers outside this module use ``resolve``."""
        handle = (handle or "").strip()
        if not handle.isdigit():
            raise NotFoundError("Client handle", handle)

        matches = (
            db.query(Client)
            .filter(Client.handle == handle, Client.active.is_(True))
            .limit(2)
            .all()
        )
        if len(matches) != 1:
            raise NotFoundError("Client handle", handle)

        client = matches[0]
        if token is not None and not security.tokens_match(token, client.access_token):
            raise ForbiddenError("Token does not match handle")
        return client

    @staticmethod
    def resolve(db: Session, handle: str, token: Optional[str] = None) -> Client:
        try:
            return ClientAccessResolver.lookup(db, handle, token)
        except NotFoundError as e:
            logger.warning("Client link rejected: unknown handle %r", handle)
            raise InvalidLinkError() from e
        except ForbiddenError as e:
            logger.warning("Client link rejected: token mismatch for handle %r", handle)
            raise InvalidLinkError() from e

    @staticmethod
    def resolve_by_token(db: Session, token: str) -> Client:
        """Token-only link form (``/student/t/<token>``); same error contract as ``resolve``."""
        token = (token or "").strip()
        client = None
        if token:
            client = (
                db.query(Client)
                .filter(
                    Client.access_token_digest == security.link_token_digest(token),
                    Client.active.is_(True),
                )
                .first()
            )
        if client is None or not security.tokens_match(token, client.access_token):
            logger.warning("Client link rejected: unknown token")
            raise InvalidLinkError() from NotFoundError("Client token", "<redacted>")
        return client
