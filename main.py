# Firebase CLI entry point: functions are discovered from this module
from chaty_notifications.main import send_message_notification  # noqa: F401
