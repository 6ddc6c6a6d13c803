"""Service layer for collection rosters and member roles."""

from __future__ import annotations

from typing import Any

from flask import current_app

from coyroster.collection.models import MemberRecord, Membership, UserProfile
from coyroster.collection.utils import (
    assemble_roster,
    derive_role,
    filter_blocked,
    order_member_ids,
    resolve_membership,
)
from coyroster.constants import (
    COLLECTION_ADMINS,
    COLLECTION_MEMBERS,
    COLLECTION_OWNER_ID,
    COLLECTION_TYPE,
    DEFAULT_LOOKUP_WORKERS,
    ROLE_ADMIN,
    ROLE_CREATOR,
    ROLE_MEMBER,
    USER_BLOCKED_USERS,
)
from coyroster.errors import (
    AccessDenied,
    CollaboratorError,
    DemotionFailed,
    FetchFailed,
    MembershipUpdateFailed,
    NotFoundError,
    PromotionFailed,
    ValidationError,
)

from .stores import FirestoreMembershipStore, FirestoreUserDirectory


class RosterService:
    """Assembles collection rosters and changes member roles.

    ``membership_store`` needs ``get_membership``, ``add_admin``,
    ``remove_admin`` and ``remove_member``; ``user_directory`` needs
    ``get_user`` and ``get_users``. Nothing is cached between calls.

    Every operation takes an optional ``fallback_owner_id``, used as the
    creator when the stored document has no ``ownerId``.
    """

    def __init__(self, membership_store: Any, user_directory: Any) -> None:
        self.membership_store = membership_store
        self.user_directory = user_directory

    @classmethod
    def from_db(
        cls, db: Any, max_workers: int = DEFAULT_LOOKUP_WORKERS
    ) -> RosterService:
        """Build a service backed by a Firestore client."""
        return cls(
            FirestoreMembershipStore(db),
            FirestoreUserDirectory(db, max_workers=max_workers),
        )

    @staticmethod
    def _require_id(value: str | None, label: str) -> None:
        if not value or not isinstance(value, str):
            raise ValidationError(f"A {label} is required.")

    @staticmethod
    def _resolve(
        membership: Membership,
        fallback_owner_id: str | None = None,
        collection_type: str | None = None,
    ) -> tuple[str | None, list[str], list[str]]:
        """Return (owner_id, admins, members) with defaults applied."""
        owner_id = membership.get(COLLECTION_OWNER_ID) or fallback_owner_id
        if collection_type is None:
            collection_type = membership.get(COLLECTION_TYPE)
        admins, members = resolve_membership(
            owner_id,
            list(membership.get(COLLECTION_ADMINS) or []),
            list(membership.get(COLLECTION_MEMBERS) or []),
            collection_type,
        )
        return owner_id, admins, members

    def _read_membership(
        self, collection_id: str, error_cls: type[CollaboratorError]
    ) -> Membership | None:
        try:
            return self.membership_store.get_membership(collection_id)
        except Exception as e:
            current_app.logger.error(
                f"Error reading membership of collection {collection_id}: {e}"
            )
            raise error_cls(cause=e) from e

    def _read_existing_membership(
        self, collection_id: str, error_cls: type[CollaboratorError]
    ) -> Membership:
        membership = self._read_membership(collection_id, error_cls)
        if membership is None:
            raise NotFoundError("Collection not found.")
        return membership

    def _blocked_users_of(
        self, viewer_id: str, profiles: dict[str, UserProfile]
    ) -> list[str]:
        """Return the viewer's block list, reusing an already fetched profile."""
        profile = profiles.get(viewer_id)
        if profile is None:
            try:
                profile = self.user_directory.get_user(viewer_id)
            except Exception as e:
                current_app.logger.warning(
                    f"Could not load blocked users of {viewer_id}: {e}"
                )
        return list((profile or {}).get(USER_BLOCKED_USERS) or [])

    def load_roster(
        self,
        collection_id: str,
        fallback_owner_id: str | None = None,
        collection_type: str | None = None,
        viewer_id: str | None = None,
    ) -> list[MemberRecord]:
        """Return the collection's members ordered by role, then username.

        A missing collection document yields an empty roster. Members whose
        profile cannot be found are left out, as are users the viewer blocked
        or who blocked the viewer.
        """
        self._require_id(collection_id, "collection id")

        membership = self._read_membership(collection_id, FetchFailed)
        if membership is None:
            return []

        owner_id, admins, members = self._resolve(
            membership, fallback_owner_id, collection_type
        )
        ordered_ids = order_member_ids(owner_id, admins, members)
        profiles = self.user_directory.get_users(ordered_ids)
        if viewer_id:
            profiles = filter_blocked(
                profiles, viewer_id, self._blocked_users_of(viewer_id, profiles)
            )
        return assemble_roster(ordered_ids, profiles, owner_id, admins)

    def get_role(
        self,
        collection_id: str,
        user_id: str,
        fallback_owner_id: str | None = None,
        collection_type: str | None = None,
    ) -> str | None:
        """Return a user's role, or None if they are not on the roster."""
        self._require_id(collection_id, "collection id")
        membership = self._read_membership(collection_id, FetchFailed)
        if membership is None:
            return None
        owner_id, admins, members = self._resolve(
            membership, fallback_owner_id, collection_type
        )
        if user_id not in order_member_ids(owner_id, admins, members):
            return None
        return derive_role(user_id, owner_id, admins)

    def promote(
        self,
        collection_id: str,
        user_id: str,
        acting_user_id: str | None = None,
        fallback_owner_id: str | None = None,
    ) -> bool:
        """Make a member an admin.

        Returns False without writing when the user is already an admin.
        """
        self._require_id(collection_id, "collection id")
        self._require_id(user_id, "user id")

        membership = self._read_existing_membership(collection_id, PromotionFailed)
        owner_id, admins, members = self._resolve(membership, fallback_owner_id)

        if acting_user_id is not None and acting_user_id != owner_id:
            raise AccessDenied("Only the creator can promote members.")

        role = derive_role(user_id, owner_id, admins)
        if role == ROLE_CREATOR:
            raise ValidationError("The creator cannot be promoted.")
        if role == ROLE_ADMIN:
            current_app.logger.info(
                f"User {user_id} is already an admin of collection {collection_id}."
            )
            return False
        if user_id not in members:
            raise ValidationError("User is not a member of this collection.")

        try:
            self.membership_store.add_admin(collection_id, user_id)
        except Exception as e:
            current_app.logger.error(
                f"Error promoting user {user_id} in collection {collection_id}: {e}"
            )
            raise PromotionFailed(cause=e) from e

        current_app.logger.info(
            f"User {user_id} promoted to admin in collection {collection_id}."
        )
        return True

    def demote(
        self,
        collection_id: str,
        user_id: str,
        acting_user_id: str | None = None,
        fallback_owner_id: str | None = None,
    ) -> bool:
        """Return an admin to plain membership.

        Returns False without writing when the user is not an admin.
        """
        self._require_id(collection_id, "collection id")
        self._require_id(user_id, "user id")

        membership = self._read_existing_membership(collection_id, DemotionFailed)
        owner_id, admins, _ = self._resolve(membership, fallback_owner_id)

        if acting_user_id is not None and acting_user_id != owner_id:
            raise AccessDenied("Only the creator can demote admins.")

        role = derive_role(user_id, owner_id, admins)
        if role == ROLE_CREATOR:
            raise ValidationError("The creator cannot be demoted.")
        if role != ROLE_ADMIN:
            return False

        try:
            self.membership_store.remove_admin(collection_id, user_id)
        except Exception as e:
            current_app.logger.error(
                f"Error demoting user {user_id} in collection {collection_id}: {e}"
            )
            raise DemotionFailed(cause=e) from e

        current_app.logger.info(
            f"User {user_id} demoted from admin in collection {collection_id}."
        )
        return True

    def remove_member(
        self,
        collection_id: str,
        user_id: str,
        acting_user_id: str | None = None,
        fallback_owner_id: str | None = None,
    ) -> None:
        """Remove a user from the collection, including its admins."""
        self._require_id(collection_id, "collection id")
        self._require_id(user_id, "user id")

        membership = self._read_existing_membership(
            collection_id, MembershipUpdateFailed
        )
        owner_id, admins, members = self._resolve(membership, fallback_owner_id)

        if user_id not in order_member_ids(owner_id, admins, members):
            raise ValidationError("User is not a member of this collection.")

        role = derive_role(user_id, owner_id, admins)
        if role == ROLE_CREATOR:
            raise ValidationError("The creator cannot be removed.")

        if acting_user_id is not None:
            # The creator removes anyone; admins only remove plain members.
            acting_role = derive_role(acting_user_id, owner_id, admins)
            allowed = acting_role == ROLE_CREATOR or (
                acting_role == ROLE_ADMIN and role == ROLE_MEMBER
            )
            if not allowed:
                raise AccessDenied("You do not have permission to remove this user.")

        self._write_removal(collection_id, user_id, membership)

    def leave_collection(
        self,
        collection_id: str,
        user_id: str,
        fallback_owner_id: str | None = None,
    ) -> None:
        """Remove the calling user from the collection."""
        self._require_id(collection_id, "collection id")
        self._require_id(user_id, "user id")

        membership = self._read_existing_membership(
            collection_id, MembershipUpdateFailed
        )
        owner_id, admins, members = self._resolve(membership, fallback_owner_id)

        if user_id == owner_id:
            raise ValidationError("The creator cannot leave their own collection.")
        if user_id not in admins and user_id not in members:
            raise ValidationError("You are not a member of this collection.")

        self._write_removal(collection_id, user_id, membership)

    def _write_removal(
        self, collection_id: str, user_id: str, membership: Membership
    ) -> None:
        # memberCount tracks the stored members list only
        in_members = user_id in (membership.get(COLLECTION_MEMBERS) or [])
        try:
            self.membership_store.remove_member(
                collection_id, user_id, decrement_count=in_members
            )
        except Exception as e:
            current_app.logger.error(
                f"Error removing user {user_id} from collection {collection_id}: {e}"
            )
            raise MembershipUpdateFailed(cause=e) from e

        current_app.logger.info(
            f"User {user_id} removed from collection {collection_id}."
        )
