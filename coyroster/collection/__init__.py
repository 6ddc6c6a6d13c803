"""The collection blueprint."""

from flask import Blueprint

bp = Blueprint("collection", __name__, url_prefix="/collections")

from . import routes  # noqa: E402

__all__ = ["routes"]
