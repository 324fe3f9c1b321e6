# sitecms/auth/context.py
"""
Per-request user context: the signed-in user and their site memberships.

Loading is retried a bounded number of times. When every attempt fails the
session is terminated (token blocklisted) instead of being retried again
on the next request.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from sitecms.domain.exceptions import NotFound, SessionTerminated
from sitecms.extensions import db
from sitecms.models.membership import MEMBERSHIP_ROLES, SiteMembership
from sitecms.models.user import User
from .tokens import revoke_token

logger = logging.getLogger(__name__)


@dataclass
class UserContext:
    user: User
    # site_id -> role
    memberships: Dict[str, str] = field(default_factory=dict)

    def role_for(self, site_id: str) -> Optional[str]:
        return self.memberships.get(site_id)

    def require_site(self, site_id: str) -> str:
        """Role on `site_id`; a foreign site is reported like a missing one."""
        role = self.role_for(site_id)
        if role is None:
            raise NotFound("Site not found")
        return role


def role_at_least(role: Optional[str], minimum: str) -> bool:
    if role not in MEMBERSHIP_ROLES:
        return False
    return MEMBERSHIP_ROLES.index(role) >= MEMBERSHIP_ROLES.index(minimum)


def _fetch(user_id: str) -> Optional[UserContext]:
    user = db.session.get(User, user_id)
    if user is None or not user.is_active:
        return None

    rows = SiteMembership.query.filter_by(user_id=user.id).all()
    return UserContext(
        user=user,
        memberships={row.site_id: row.role for row in rows},
    )


def load_user_context(*, user_id: str, jti: str) -> UserContext:
    attempts = max(1, current_app.config["MEMBERSHIP_FETCH_ATTEMPTS"])
    backoff = current_app.config["MEMBERSHIP_FETCH_BACKOFF_SECONDS"]

    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            context = _fetch(user_id)
        except SQLAlchemyError as exc:
            db.session.rollback()
            last_error = exc
            logger.warning(
                "Loading context for user %s failed (attempt %s/%s): %s",
                user_id, attempt, attempts, exc,
            )
            if attempt < attempts and backoff:
                time.sleep(backoff * attempt)
            continue

        if context is None:
            # Unknown or disabled account: retrying cannot help.
            revoke_token(jti=jti, user_id=user_id, reason="account_unavailable")
            raise SessionTerminated("Account is not available")

        return context

    logger.error("Giving up on context for user %s after %s attempts: %s", user_id, attempts, last_error)
    revoke_token(jti=jti, user_id=user_id, reason="context_unavailable")
    raise SessionTerminated("Could not load session context, sign in again")
