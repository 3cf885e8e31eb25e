from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore


@dataclass
class FirebaseConfig:
    credentials_path: Optional[str]
    project_id: Optional[str]
    web_api_key: Optional[str]


class FirebaseConnection:
    """Singleton-like holder of the initialized Firebase app.

    Note: firebase_admin keeps a process-wide default app; we initialize it once
    and hand out the Firestore client.
    """

    _instance: Optional["FirebaseConnection"] = None

    def __init__(self, config: FirebaseConfig):
        self._config = config
        self._app: Optional[firebase_admin.App] = None

    @classmethod
    def get_instance(cls, config: FirebaseConfig) -> "FirebaseConnection":
        if cls._instance is None:
            cls._instance = FirebaseConnection(config)
        return cls._instance

    @property
    def config(self) -> FirebaseConfig:
        return self._config

    def app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                if self._config.credentials_path:
                    cred = credentials.Certificate(self._config.credentials_path)
                else:
                    cred = credentials.ApplicationDefault()
                options = {"projectId": self._config.project_id} if self._config.project_id else None
                self._app = firebase_admin.initialize_app(cred, options)
        return self._app

    def firestore(self):
        return firestore.client(self.app())
