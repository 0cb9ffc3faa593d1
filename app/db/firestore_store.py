import logging
from typing import Any, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud.firestore_v1.base_query import FieldFilter

from db.store import ReminderStore
from models.records import ReminderRecord, ReminderUpdate, UserRecord

logger = logging.getLogger(__name__)

REMINDERS_COLLECTION = "reminders"
USERS_COLLECTION = "users"
TOKEN_URI = "https://oauth2.googleapis.com/token"


def init_firebase_app(
    project_id: Optional[str],
    client_email: Optional[str],
    private_key: Optional[str],
) -> firebase_admin.App:
    """
    Initialize the default Firebase app from service account fields.

    Args:
        project_id: Firebase project id
        client_email: Service account email
        private_key: Service account private key (PEM, real newlines)

    Returns:
        The default firebase_admin App, reused if already initialized
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    missing = [
        name for name, value in (
            ("FIREBASE_PROJECT_ID", project_id),
            ("FIREBASE_CLIENT_EMAIL", client_email),
            ("FIREBASE_PRIVATE_KEY", private_key),
        ) if not value
    ]
    if missing:
        raise ValueError(f"Firestore backend requires {', '.join(missing)}")

    cred = credentials.Certificate({
        "type": "service_account",
        "project_id": project_id,
        "client_email": client_email,
        "private_key": private_key,
        "token_uri": TOKEN_URI,
    })
    app = firebase_admin.initialize_app(cred, options={"projectId": project_id})
    logger.info(f"Firebase app initialized for project {project_id}")
    return app


class FirestoreReminderStore(ReminderStore):
    """Reminder store backed by Cloud Firestore collections."""

    def __init__(self, client: Any):
        """
        Initialize the store.

        Args:
            client: google.cloud.firestore AsyncClient
        """
        self.client = client

    @classmethod
    def from_credentials(
        cls,
        project_id: Optional[str],
        client_email: Optional[str],
        private_key: Optional[str],
    ) -> "FirestoreReminderStore":
        app = init_firebase_app(project_id, client_email, private_key)
        return cls(firestore_async.client(app))

    async def list_enabled_reminders(self) -> List[ReminderRecord]:
        snapshots = await (
            self.client.collection(REMINDERS_COLLECTION)
            .where(filter=FieldFilter("enabled", "==", True))
            .get()
        )
        return [
            ReminderRecord.from_document(snapshot.id, snapshot.to_dict() or {})
            for snapshot in snapshots
        ]

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        if not user_id:
            return None

        snapshot = await self.client.collection(USERS_COLLECTION).document(user_id).get()
        if not snapshot.exists:
            return None

        return UserRecord.from_document(snapshot.id, snapshot.to_dict() or {})

    async def update_reminder(self, reminder_id: str, outcome: ReminderUpdate) -> None:
        await (
            self.client.collection(REMINDERS_COLLECTION)
            .document(reminder_id)
            .update(outcome.to_document())
        )
