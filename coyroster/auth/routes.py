"""Routes for the auth blueprint."""

from firebase_admin import auth, firestore
from flask import current_app, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from coyroster.constants import USERS_TABLE
from coyroster.extensions import csrf

from . import bp


@bp.route("/session_login", methods=["POST"])
@csrf.exempt
def session_login():
    """
    Called by the client after a successful Firebase sign-in.
    It receives the ID token, verifies it, and creates a server-side session.
    """
    id_token = (request.get_json(silent=True) or {}).get("idToken")
    if not id_token:
        return jsonify({"status": "error", "message": "Missing idToken."}), 400
    try:
        decoded_token = auth.verify_id_token(id_token)
        uid = decoded_token["uid"]
        db = firestore.client()
        user_doc = db.collection(USERS_TABLE).document(uid).get()
    except Exception as e:
        current_app.logger.error(f"Error during session login: {e}")
        return (
            jsonify({"status": "error", "message": "Invalid token or server error."}),
            401,
        )

    if not user_doc.exists:
        return (
            jsonify({"status": "error", "message": "User not found in Firestore."}),
            404,
        )
    session["user_id"] = uid
    return jsonify({"status": "success"})


@bp.route("/logout")
def logout():
    """Clear the server-side session."""
    session.clear()
    return jsonify({"status": "success"})


@bp.route("/csrf_token", methods=["GET"])
def csrf_token():
    """Hand the client a CSRF token for form posts."""
    return jsonify({"csrf_token": generate_csrf()})
