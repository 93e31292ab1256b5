"""
Error taxonomy for the background mechanisms.
"""

from __future__ import annotations


class LifecycleError(Exception):
    """Base class for failures raised by background mechanisms and their collaborators."""


class DeliveryError(LifecycleError):
    """A notification could not be handed to the delivery channel."""


class PermissionDeniedError(DeliveryError):
    """The user or platform refused notification permission. Terminal for the item."""


class RefreshError(LifecycleError):
    """A refresh collaborator failed to reload its data."""
