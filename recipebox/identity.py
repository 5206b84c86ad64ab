"""Owner identity resolution.

The hosted sign-in widget authenticates users; the proxy in front of this
service forwards the verified identity as request headers. Business logic
only ever sees the single owner id returned by :func:`resolve_owner_id`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .errors import AuthenticationError

USER_ID_HEADER = "X-User-Id"
EMAIL_HEADER = "X-User-Email"
LOGIN_IDS_HEADER = "X-Login-Ids"


@dataclass
class Identity:
    user_id: Optional[str] = None
    email: Optional[str] = None
    login_ids: List[str] = field(default_factory=list)


def identity_from_headers(headers: Mapping[str, str]) -> Identity:
    login_ids = headers.get(LOGIN_IDS_HEADER) or ""
    return Identity(
        user_id=headers.get(USER_ID_HEADER),
        email=headers.get(EMAIL_HEADER),
        login_ids=[value.strip() for value in login_ids.split(",") if value.strip()],
    )


def resolve_owner_id(identity: Identity) -> str:
    """Return the owner id for ``identity``.

    Precedence: ``user_id``, then ``email``, then the first login id. Blank
    values are skipped.
    """

    candidates = [identity.user_id, identity.email]
    candidates.extend(identity.login_ids[:1])

    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()

    raise AuthenticationError("Please sign in to manage recipes.")


__all__ = ["Identity", "identity_from_headers", "resolve_owner_id"]
