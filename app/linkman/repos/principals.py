from __future__ import annotations

from typing import Iterable

from sqlalchemy import select

from app.linkman.core.acl import AccessControlEntry, normalize_names
from app.linkman.db.models import ACE_GROUP, ACE_ROLE, ACE_USER


def desired_principals(entry: AccessControlEntry) -> set[tuple[str, str]]:
    principals = {(ACE_USER, value) for value in entry.users}
    principals |= {(ACE_ROLE, value) for value in entry.roles}
    principals |= {(ACE_GROUP, value) for value in entry.groups}
    return principals


def principal_values(records) -> dict[str, set[str]]:
    values: dict[str, set[str]] = {ACE_USER: set(), ACE_ROLE: set(), ACE_GROUP: set()}
    for record in records or ():
        values.setdefault(record.kind, set()).add(record.value)
    return values


def sync_principals(collection: list, desired: set[tuple[str, str]], record_type) -> None:
    """Bring a principal collection in line with ``desired``.

    Unchanged rows are kept in place, which avoids a delete and a re-insert of the same
    (kind, value) pair within one flush.
    """
    existing = {(record.kind, record.value): record for record in collection}
    for key, record in existing.items():
        if key not in desired:
            collection.remove(record)
    for kind, value in sorted(desired - existing.keys()):
        collection.append(record_type(kind=kind, value=value))


def readable_criteria(
    record_type,
    principal_fk,
    user_id: str | None,
    roles: Iterable[str] | None,
    groups: Iterable[str] | None,
) -> list:
    """Build the OR-ed criteria selecting records whose read entry matches the identity.

    Role and group criteria are skipped for empty operand sets so that an empty set never
    matches by accident.
    """
    principal_type = principal_fk.class_

    def _principal_clause(kind: str, values: Iterable[str]):
        subquery = select(principal_fk).where(
            principal_type.kind == kind,
            principal_type.value.in_(list(values)),
        )
        return record_type.id.in_(subquery)

    criteria = [record_type.matches_guest.is_(True)]
    if user_id:
        criteria.append(record_type.acl_owner == user_id)
        criteria.append(_principal_clause(ACE_USER, [user_id]))
    role_names = normalize_names(roles)
    if role_names:
        criteria.append(_principal_clause(ACE_ROLE, role_names))
    group_names = normalize_names(groups)
    if group_names:
        criteria.append(_principal_clause(ACE_GROUP, group_names))
    return criteria
