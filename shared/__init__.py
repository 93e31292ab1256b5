"""
Types and validation shared by the client runtime and its tooling.
"""

from .notification_item import NotificationItem  # noqa: F401
from .settings_schema import SettingsValidationError, load_and_validate_settings  # noqa: F401
