from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    EMOJI = "emoji"


class DispatchStatus(str, Enum):
    EMPTY_MESSAGE = "empty_message"
    MISSING_RECEIVER = "missing_receiver"
    RECEIVER_NOT_FOUND = "receiver_not_found"
    MISSING_TOKEN = "missing_token"
    SENT = "sent"
    FAILED = "failed"


class ChatMessage(BaseModel):
    """Message document created under chats/{chatId}/messages"""
    model_config = ConfigDict(extra="ignore")

    senderId: Optional[str] = None
    receiverId: Optional[str] = None
    content: Optional[str] = None
    type: Optional[str] = MessageType.TEXT.value


class UserProfile(BaseModel):
    """Fields of a users/{userId} document this function reads"""
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    fcmToken: Optional[str] = None


class NotificationData(BaseModel):
    """Data block delivered with the push; FCM requires string values"""
    chatId: str
    senderId: str
    type: str = "message"


class NotificationPayload(BaseModel):
    title: str
    body: str
    sound: str
    data: NotificationData
    token: str


class DispatchOutcome(BaseModel):
    """Result of handling one created message"""
    status: DispatchStatus
    chatId: str
    messageId: str
    receiverId: Optional[str] = None
    gatewayMessageId: Optional[str] = None
    error: Optional[str] = None

    @property
    def sent(self) -> bool:
        return self.status == DispatchStatus.SENT
