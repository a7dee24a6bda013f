from __future__ import annotations

import logging

from app.linkman.core.config import settings
from app.linkman.core.context import UserContext
from app.linkman.core.security import TokenData
from app.linkman.services.groups import GroupService, SelectOption

logger = logging.getLogger(__name__)


async def resolve_user_context(token_data: TokenData | None, groups: GroupService) -> UserContext:
    """Build the caller identity used for visibility decisions.

    Group ids combine the internal group memberships with any ``groups`` claim of the token.
    """
    if token_data is None:
        return UserContext.anonymous()
    membership_ids = await groups.get_membership_ids(token_data.sub)
    context = UserContext(
        user_id=token_data.sub,
        roles=frozenset(token_data.roles),
        groups=frozenset(membership_ids) | frozenset(token_data.groups),
    )
    logger.debug(
        "user_context_resolved",
        extra={"user_id": context.user_id, "roles": sorted(context.roles), "groups": len(context.groups)},
    )
    return context


def get_role_options() -> list[SelectOption]:
    # Excluded roles are hidden from pickers only; they still count when matching.
    excluded = set(settings.EXCLUDED_ROLES)
    return [
        SelectOption(value=role, display_value=role)
        for role in settings.AVAILABLE_ROLES
        if role and role not in excluded
    ]
