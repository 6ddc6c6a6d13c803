"""Services for collection rosters."""

from .roster import RosterService
from .stores import FirestoreMembershipStore, FirestoreUserDirectory

__all__ = ["RosterService", "FirestoreMembershipStore", "FirestoreUserDirectory"]
