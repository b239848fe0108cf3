import json
import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore, messaging

from .config import settings
from .schemas import NotificationPayload, UserProfile

logger = logging.getLogger(__name__)


class FirebaseClient:
    """Process-wide Firebase Admin client used for profile reads and FCM sends."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(FirebaseClient, cls).__new__(cls)
            cls._instance.initialized = False
        return cls._instance

    def __init__(self):
        if self.initialized:
            return
        self.app = None
        self._firestore_db = None
        self.connect()
        self.initialized = True

    def connect(self) -> None:
        """Reuse the default Firebase app or initialize it."""
        try:
            self.app = firebase_admin.get_app()
            logger.info("Retrieved existing Firebase app")
        except ValueError:
            self.app = self._initialize_app()
            logger.info(f"Firebase app initialized. App name: {self.app.name}")

    @property
    def firestore_db(self):
        # Created on first read: resolving credentials and project needs the runtime environment
        if self._firestore_db is None:
            self._firestore_db = firestore.client(self.app)
        return self._firestore_db

    @staticmethod
    def _initialize_app() -> firebase_admin.App:
        cert_json = settings.firebase_secret
        if not cert_json:
            # Cloud Functions runtime provides application default credentials
            return firebase_admin.initialize_app()

        try:
            cert_dict = json.loads(cert_json)
            if isinstance(cert_dict, str):
                cert_dict = json.loads(cert_dict)
            cred = credentials.Certificate(cert_dict)
        except ValueError as e:
            logger.error(f"Invalid Firebase secret: {str(e)}")
            raise
        return firebase_admin.initialize_app(credential=cred)

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        """
        Get a user profile from Firestore.

        Args:
            user_id: The user's ID

        Returns:
            The parsed profile, or None if the user document does not exist
        """
        user_ref = self.firestore_db.collection(settings.users_collection).document(user_id)
        user = user_ref.get()

        if not user.exists:
            return None
        return UserProfile.model_validate(user.to_dict() or {})

    def send_notification(self, payload: NotificationPayload) -> str:
        """
        Send a push notification to a single device through FCM.

        Args:
            payload: Notification addressed to one registration token

        Returns:
            The FCM message ID
        """
        message = messaging.Message(
            notification=messaging.Notification(
                title=payload.title,
                body=payload.body
            ),
            android=messaging.AndroidConfig(
                notification=messaging.AndroidNotification(sound=payload.sound)
            ),
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(aps=messaging.Aps(sound=payload.sound))
            ),
            data=payload.data.model_dump(),
            token=payload.token
        )
        return messaging.send(message, dry_run=settings.fcm_dry_run, app=self.app)
