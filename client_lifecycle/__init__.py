"""
Background lifecycle runtime for the admin client: inactivity monitoring,
periodic refresh and serialized desktop notifications.
"""

from .activity_tracker import ActivityRecord, ActivityTracker  # noqa: F401
from .delivery_queue import DeliveryQueue, get_delivery_queue  # noqa: F401
from .inactivity_monitor import InactivityMonitor  # noqa: F401
from .refresh_poller import RefreshPoller  # noqa: F401
from .settings import ClientSettings, ClientSettingsManager  # noqa: F401
