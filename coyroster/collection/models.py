"""Data models for the collection blueprint."""

from __future__ import annotations

from typing import TypedDict

from coyroster.core.types import FirestoreDocument


class Membership(FirestoreDocument, total=False):
    """The membership fields of a document in the 'collections' collection.

    ``owners`` is the legacy elevated-rights list; roles never derive from it.
    """

    ownerId: str
    admins: list[str]
    members: list[str]
    owners: list[str]
    type: str
    memberCount: int


class UserProfile(TypedDict, total=False):
    """The profile fields read from a 'users' document."""

    username: str
    name: str
    profileImageURL: str | None
    blockedUsers: list[str]


class MemberRecord(TypedDict):
    """A single roster entry, rebuilt on every roster load."""

    userId: str
    username: str
    displayName: str
    profileImageUrl: str | None
    role: str
