"""Firestore-backed collaborators for the roster service."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore
from flask import current_app

from coyroster.collection.models import Membership, UserProfile
from coyroster.constants import (
    COLLECTION_ADMINS,
    COLLECTION_MEMBER_COUNT,
    COLLECTION_MEMBERS,
    COLLECTIONS_TABLE,
    DEFAULT_LOOKUP_WORKERS,
    USERS_TABLE,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class FirestoreMembershipStore:
    """Reads and updates the membership fields of 'collections' documents."""

    def __init__(self, db: Client | Any) -> None:
        self.db = db

    def _collection_ref(self, collection_id: str) -> Any:
        return self.db.collection(COLLECTIONS_TABLE).document(collection_id)

    def get_membership(self, collection_id: str) -> Membership | None:
        """Return the membership document, or None if it does not exist."""
        doc = self._collection_ref(collection_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        data["id"] = doc.id
        return data

    def add_admin(self, collection_id: str, user_id: str) -> None:
        """Add a user to the admins list. Adding an existing admin is a no-op."""
        self._collection_ref(collection_id).update(
            {COLLECTION_ADMINS: firestore.ArrayUnion([user_id])}
        )

    def remove_admin(self, collection_id: str, user_id: str) -> None:
        self._collection_ref(collection_id).update(
            {COLLECTION_ADMINS: firestore.ArrayRemove([user_id])}
        )

    def remove_member(
        self, collection_id: str, user_id: str, decrement_count: bool = True
    ) -> None:
        """Drop a user from both members and admins in a single update.

        ``memberCount`` is only decremented when ``decrement_count`` is set.
        """
        update = {
            COLLECTION_MEMBERS: firestore.ArrayRemove([user_id]),
            COLLECTION_ADMINS: firestore.ArrayRemove([user_id]),
        }
        if decrement_count:
            update[COLLECTION_MEMBER_COUNT] = firestore.Increment(-1)
        self._collection_ref(collection_id).update(update)


class FirestoreUserDirectory:
    """Looks up user profiles in the 'users' collection."""

    def __init__(
        self, db: Client | Any, max_workers: int = DEFAULT_LOOKUP_WORKERS
    ) -> None:
        self.db = db
        self.max_workers = max(1, max_workers)

    def get_user(self, user_id: str) -> UserProfile | None:
        """Return a user's profile, or None if the user does not exist."""
        doc = self.db.collection(USERS_TABLE).document(user_id).get()
        if not doc.exists:
            return None
        return doc.to_dict() or {}

    def get_users(self, user_ids: list[str]) -> dict[str, UserProfile]:
        """Look up several users concurrently.

        Users that are missing or whose lookup raised are left out of the
        result and logged. Worker threads only fetch; logging happens here on
        the calling thread, which holds the app context.
        """
        if not user_ids:
            return {}

        profiles: dict[str, UserProfile] = {}
        workers = min(self.max_workers, len(user_ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                user_id: executor.submit(self.get_user, user_id)
                for user_id in user_ids
            }
            for user_id, future in futures.items():
                try:
                    profile = future.result()
                except Exception as e:
                    current_app.logger.warning(
                        f"Profile lookup failed for user {user_id}: {e}"
                    )
                    continue
                if profile is None:
                    current_app.logger.warning(
                        f"User {user_id} not found, leaving them out of the roster."
                    )
                    continue
                profiles[user_id] = profile
        return profiles
