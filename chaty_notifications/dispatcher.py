import logging
from typing import Any, Dict, Optional

from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from .config import settings
from .firebase_client import FirebaseClient
from .schemas import (ChatMessage, DispatchOutcome, DispatchStatus,
                      MessageType, NotificationData, NotificationPayload,
                      UserProfile)

logger = logging.getLogger(__name__)

IMAGE_BODY = "📷 Sent an image"
AUDIO_BODY = "🎤 Sent an audio message"
EMOJI_FALLBACK = "😊"

# GoogleAPIError includes RetryError from exhausted Firestore retries;
# ValueError covers pydantic validation and firebase_admin argument checks
DISPATCH_ERRORS = (FirebaseError, GoogleAPIError, GoogleAuthError, ValueError)


def build_notification_body(message: ChatMessage) -> str:
    if message.type == MessageType.IMAGE:
        return IMAGE_BODY
    if message.type == MessageType.AUDIO:
        return AUDIO_BODY
    if message.type == MessageType.EMOJI:
        return message.content or EMOJI_FALLBACK
    return message.content or ""


def resolve_sender_name(sender: Optional[UserProfile]) -> str:
    if sender and sender.username:
        return sender.username
    return settings.fallback_sender_name


class NotificationDispatcher:
    """Turns a newly created chat message into a push notification for its receiver."""

    def __init__(self, firebase_client: FirebaseClient):
        """
        Initialize the dispatcher.

        Args:
            firebase_client: Client providing profile lookups and FCM sends
        """
        self.firebase = firebase_client

    def dispatch(self, message_data: Optional[Dict[str, Any]], chat_id: str, message_id: str) -> DispatchOutcome:
        """
        Notify the receiver of a created message.

        Never raises for profile store, FCM or validation failures; every
        path ends in a logged outcome.

        Args:
            message_data: Fields of the created message document, if any
            chat_id: Chat the message belongs to
            message_id: ID of the created message document

        Returns:
            The outcome of this invocation
        """
        outcome = DispatchOutcome(status=DispatchStatus.FAILED, chatId=chat_id, messageId=message_id)
        try:
            self._dispatch(message_data, outcome)
        except DISPATCH_ERRORS as e:
            outcome.status = DispatchStatus.FAILED
            outcome.error = str(e)

        self._log_outcome(outcome)
        return outcome

    def _dispatch(self, message_data: Optional[Dict[str, Any]], outcome: DispatchOutcome) -> None:
        if not message_data:
            outcome.status = DispatchStatus.EMPTY_MESSAGE
            return

        message = ChatMessage.model_validate(message_data)
        receiver_id = message.receiverId
        if not receiver_id:
            outcome.status = DispatchStatus.MISSING_RECEIVER
            return
        outcome.receiverId = receiver_id

        receiver = self.firebase.get_user_profile(receiver_id)
        if receiver is None:
            outcome.status = DispatchStatus.RECEIVER_NOT_FOUND
            return

        if not receiver.fcmToken:
            outcome.status = DispatchStatus.MISSING_TOKEN
            return

        sender = self._get_sender_profile(message.senderId, outcome.chatId)

        payload = NotificationPayload(
            title=resolve_sender_name(sender),
            body=build_notification_body(message),
            sound=settings.notification_sound,
            data=NotificationData(chatId=outcome.chatId, senderId=message.senderId or ""),
            token=receiver.fcmToken
        )

        outcome.gatewayMessageId = self.firebase.send_notification(payload)
        outcome.status = DispatchStatus.SENT

    def _get_sender_profile(self, sender_id: Optional[str], chat_id: str) -> Optional[UserProfile]:
        """Best-effort sender lookup; a failure only costs the display name."""
        if not sender_id:
            return None
        try:
            return self.firebase.get_user_profile(sender_id)
        except DISPATCH_ERRORS as e:
            logger.warning(
                f"Could not load sender {sender_id}, using fallback name",
                extra={"chatId": chat_id, "senderId": sender_id, "error": str(e)}
            )
            return None

    @staticmethod
    def _log_outcome(outcome: DispatchOutcome) -> None:
        context = {"chatId": outcome.chatId, "messageId": outcome.messageId}

        if outcome.status == DispatchStatus.EMPTY_MESSAGE:
            logger.info("Empty message, no notification will be sent", extra=context)
        elif outcome.status == DispatchStatus.MISSING_RECEIVER:
            logger.info("No receiver specified", extra=context)
        elif outcome.status == DispatchStatus.RECEIVER_NOT_FOUND:
            logger.info(f"Receiver user {outcome.receiverId} not found", extra=context)
        elif outcome.status == DispatchStatus.MISSING_TOKEN:
            logger.info(f"User {outcome.receiverId} has no FCM token", extra=context)
        elif outcome.status == DispatchStatus.SENT:
            logger.info("Notification sent successfully", extra={
                **context,
                "receiverId": outcome.receiverId,
                "gatewayMessageId": outcome.gatewayMessageId
            })
        else:
            logger.error("Error sending notification", extra={
                **context,
                "receiverId": outcome.receiverId,
                "error": outcome.error
            })
