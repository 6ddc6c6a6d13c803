"""Pure roster logic for the collection blueprint."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from coyroster.constants import (
    COLLECTION_TYPE_INDIVIDUAL,
    ROLE_ADMIN,
    ROLE_CREATOR,
    ROLE_MEMBER,
    ROLE_RANK,
    USER_BLOCKED_USERS,
    USER_NAME,
    USER_PROFILE_IMAGE_URL,
    USER_USERNAME,
)

from .models import MemberRecord, UserProfile


def derive_role(user_id: str, owner_id: str | None, admins: Iterable[str]) -> str:
    """Return the role of a user given the owner and the admin list."""
    if owner_id is not None and user_id == owner_id:
        return ROLE_CREATOR
    if user_id in admins:
        return ROLE_ADMIN
    return ROLE_MEMBER


def resolve_membership(
    owner_id: str | None,
    admins: list[str],
    members: list[str],
    collection_type: str | None,
) -> tuple[list[str], list[str]]:
    """Return (admins, members) as they apply to the collection type.

    An individual collection has exactly one member, its owner, and no admins.
    """
    if collection_type == COLLECTION_TYPE_INDIVIDUAL:
        return [], [owner_id] if owner_id else []
    return list(admins), list(members)


def is_blocked_between(
    viewer_id: str,
    viewer_blocked: Iterable[str],
    user_id: str,
    profile: UserProfile,
) -> bool:
    """True if either user has blocked the other."""
    if user_id == viewer_id:
        return False
    return user_id in viewer_blocked or viewer_id in (
        profile.get(USER_BLOCKED_USERS) or []
    )


def filter_blocked(
    profiles: Mapping[str, UserProfile],
    viewer_id: str,
    viewer_blocked: Iterable[str],
) -> dict[str, UserProfile]:
    """Drop the profiles of users the viewer blocked or who blocked the viewer."""
    viewer_blocked = set(viewer_blocked)
    return {
        user_id: profile
        for user_id, profile in profiles.items()
        if not is_blocked_between(viewer_id, viewer_blocked, user_id, profile)
    }


def order_member_ids(
    owner_id: str | None, admins: list[str], members: list[str]
) -> list[str]:
    """Build the deduplicated id sequence: owner, then admins, then members.

    Admins and members keep their stored order.
    """
    ordered: list[str] = []
    seen: set[str] = set()

    if owner_id:
        ordered.append(owner_id)
        seen.add(owner_id)

    for admin_id in admins:
        if admin_id and admin_id not in seen:
            ordered.append(admin_id)
            seen.add(admin_id)

    admin_set = set(admins)
    for member_id in members:
        if member_id and member_id not in seen and member_id not in admin_set:
            ordered.append(member_id)
            seen.add(member_id)

    return ordered


def build_member_record(
    user_id: str, profile: UserProfile, owner_id: str | None, admins: list[str]
) -> MemberRecord:
    """Combine a user profile with the user's derived role."""
    return {
        "userId": user_id,
        "username": profile.get(USER_USERNAME) or "",
        "displayName": profile.get(USER_NAME) or "",
        "profileImageUrl": profile.get(USER_PROFILE_IMAGE_URL),
        "role": derive_role(user_id, owner_id, admins),
    }


def _roster_sort_key(record: MemberRecord) -> tuple[int, str, str]:
    return (ROLE_RANK[record["role"]], record["username"], record["userId"])


def sort_roster(records: Iterable[MemberRecord]) -> list[MemberRecord]:
    """Sort records by role tier, then username."""
    return sorted(records, key=_roster_sort_key)


def assemble_roster(
    ordered_ids: list[str],
    profiles: Mapping[str, UserProfile],
    owner_id: str | None,
    admins: list[str],
) -> list[MemberRecord]:
    """Turn looked-up profiles into a sorted roster.

    Ids missing from ``profiles`` are left out.
    """
    records = [
        build_member_record(user_id, profiles[user_id], owner_id, admins)
        for user_id in ordered_ids
        if user_id in profiles
    ]
    return sort_roster(records)
