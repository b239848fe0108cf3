import logging
import time
from typing import Optional

from firebase_functions import firestore_fn
from pythonjsonlogger import jsonlogger

from .config import settings
from .dispatcher import NotificationDispatcher
from .firebase_client import FirebaseClient
from .schemas import DispatchOutcome


# Configure logging
def setup_logging():
    """Configure logging for the function."""
    log_level = getattr(logging, settings.log_level.upper())

    # Create JSON formatter for structured logging
    class CustomJsonFormatter(jsonlogger.JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
            log_record['service'] = settings.service_name
            log_record['environment'] = settings.environment
            log_record['severity'] = record.levelname
            log_record['timestamp'] = time.strftime(
                '%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)
            )

    handler = logging.StreamHandler()
    handler.setFormatter(CustomJsonFormatter('%(timestamp)s %(levelname)s %(service)s %(environment)s %(name)s %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicates
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    root_logger.addHandler(handler)

    # Set specific logger levels
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('google').setLevel(logging.WARNING)
    logging.getLogger('grpc').setLevel(logging.WARNING)


setup_logging()
logger = logging.getLogger(__name__)

# Firebase app is initialized once per process, at cold start
notification_dispatcher = NotificationDispatcher(FirebaseClient())


def handle_message_created(event: firestore_fn.Event[Optional[firestore_fn.DocumentSnapshot]],
                           dispatcher: Optional[NotificationDispatcher] = None) -> DispatchOutcome:
    """
    Dispatch the push notification for a newly created chat message.

    Args:
        event: Firestore document-created event for chats/{chatId}/messages/{messageId}
        dispatcher: Dispatcher to use; defaults to the process-wide notification_dispatcher

    Returns:
        The dispatch outcome
    """
    chat_id = event.params.get('chatId', '')
    message_id = event.params.get('messageId', '')
    logger.debug("Message created", extra={"chatId": chat_id, "messageId": message_id})

    if dispatcher is None:
        dispatcher = notification_dispatcher

    snapshot = event.data
    message_data = snapshot.to_dict() if snapshot is not None else None
    return dispatcher.dispatch(message_data, chat_id, message_id)


@firestore_fn.on_document_created(document=settings.messages_document_path)
def send_message_notification(event: firestore_fn.Event[Optional[firestore_fn.DocumentSnapshot]]) -> None:
    """Send a push notification to the receiver of every new chat message."""
    handle_message_created(event)
