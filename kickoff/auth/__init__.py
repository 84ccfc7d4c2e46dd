"""Session guards for the JSON API."""

from .decorators import login_required

__all__ = ["login_required"]
