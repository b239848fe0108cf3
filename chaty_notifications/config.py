from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration settings for the message notification function"""

    # Application settings
    service_name: str = "chaty-notifications"
    log_level: str = "INFO"
    environment: str = "dev"

    # Firebase settings
    firebase_secret: Optional[str] = None  # falls back to application default credentials
    users_collection: str = "users"
    messages_document_path: str = "chats/{chatId}/messages/{messageId}"

    # Notification settings
    fallback_sender_name: str = "Someone"
    notification_sound: str = "default"
    fcm_dry_run: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


# Create settings instance
settings = Settings()
