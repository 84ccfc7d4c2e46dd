"""Core module for the kickoff application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
