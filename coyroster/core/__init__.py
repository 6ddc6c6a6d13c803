"""Core module for the coyroster application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
