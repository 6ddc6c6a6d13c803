"""Global constants for the coyroster application."""

# Firestore collections
COLLECTIONS_TABLE = "collections"
USERS_TABLE = "users"

# Fields on 'collections' documents
COLLECTION_OWNER_ID = "ownerId"
COLLECTION_ADMINS = "admins"
COLLECTION_MEMBERS = "members"
COLLECTION_TYPE = "type"
COLLECTION_MEMBER_COUNT = "memberCount"

# Fields on 'users' documents
USER_USERNAME = "username"
USER_NAME = "name"
USER_PROFILE_IMAGE_URL = "profileImageURL"
USER_BLOCKED_USERS = "blockedUsers"

# Collection types
COLLECTION_TYPE_INDIVIDUAL = "Individual"

# Member roles, in display order
ROLE_CREATOR = "Creator"
ROLE_ADMIN = "Admin"
ROLE_MEMBER = "Member"
ROLE_RANK = {ROLE_CREATOR: 0, ROLE_ADMIN: 1, ROLE_MEMBER: 2}

# Profile lookups
DEFAULT_LOOKUP_WORKERS = 8
