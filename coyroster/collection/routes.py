"""Routes for the collection blueprint."""

from firebase_admin import firestore
from flask import current_app, g, jsonify, request

from coyroster.auth.decorators import login_required
from coyroster.constants import DEFAULT_LOOKUP_WORKERS
from coyroster.errors import FetchFailed, ValidationError

from . import bp
from .forms import MemberTargetForm
from .services import RosterService


def _roster_service():
    """Build a roster service on the app's Firestore client."""
    return RosterService.from_db(
        firestore.client(),
        max_workers=current_app.config.get(
            "ROSTER_LOOKUP_WORKERS", DEFAULT_LOOKUP_WORKERS
        ),
    )


def _target_user_id():
    """Validate the submitted form and return the targeted user id."""
    form = MemberTargetForm()
    if not form.validate_on_submit():
        raise ValidationError("A user_id is required.")
    return form.user_id.data.strip()


def _member_change_response(service, collection_id, changed):
    """Report a completed write with the reloaded roster.

    The write has already happened, so a failed reload returns no members
    instead of an error.
    """
    members = None
    try:
        members = service.load_roster(
            collection_id,
            collection_type=request.args.get("type") or None,
            viewer_id=g.user["uid"],
        )
    except FetchFailed as e:
        current_app.logger.warning(
            f"Could not reload roster of collection {collection_id}: {e.cause}"
        )
    return jsonify({"status": "success", "changed": changed, "members": members})


@bp.route("/<string:collection_id>/members", methods=["GET"])
@login_required
def view_members(collection_id):
    """Return the collection's roster and the current user's role in it."""
    service = _roster_service()
    collection_type = request.args.get("type") or None
    current_user_id = g.user["uid"]

    members = service.load_roster(
        collection_id, collection_type=collection_type, viewer_id=current_user_id
    )
    current_user_role = service.get_role(
        collection_id, current_user_id, collection_type=collection_type
    )
    return jsonify({"members": members, "current_user_role": current_user_role})


@bp.route("/<string:collection_id>/members/promote", methods=["POST"])
@login_required
def promote_member(collection_id):
    """Promote a member to admin. Only the creator may do this."""
    user_id = _target_user_id()
    service = _roster_service()
    changed = service.promote(collection_id, user_id, acting_user_id=g.user["uid"])
    return _member_change_response(service, collection_id, changed)


@bp.route("/<string:collection_id>/members/demote", methods=["POST"])
@login_required
def demote_member(collection_id):
    """Demote an admin to member. Only the creator may do this."""
    user_id = _target_user_id()
    service = _roster_service()
    changed = service.demote(collection_id, user_id, acting_user_id=g.user["uid"])
    return _member_change_response(service, collection_id, changed)


@bp.route("/<string:collection_id>/members/remove", methods=["POST"])
@login_required
def remove_member(collection_id):
    """Remove a user from the collection."""
    user_id = _target_user_id()
    service = _roster_service()
    service.remove_member(collection_id, user_id, acting_user_id=g.user["uid"])
    return _member_change_response(service, collection_id, True)


@bp.route("/<string:collection_id>/leave", methods=["POST"])
@login_required
def leave_collection(collection_id):
    """Leave a collection as the current user."""
    _roster_service().leave_collection(collection_id, g.user["uid"])
    return jsonify({"status": "success"})
