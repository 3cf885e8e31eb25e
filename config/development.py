import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# "firestore" talks to Firebase; "memory" keeps everything in-process.
DOCUMENT_BACKEND = os.getenv("DOCUMENT_BACKEND", "memory")

FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
FIREBASE_WEB_API_KEY = os.getenv("FIREBASE_WEB_API_KEY", "")

STATE_DOC_PATH = os.getenv("STATE_DOC_PATH", "appState/mainState-v11")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")
BOOTSTRAP_ADMIN_EMAIL = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "")
# Only used by the memory backend, which has no real identity service.
BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "")

# Attach the remote listener when the app starts.
START_SYNC = bool(int(os.getenv("START_SYNC", "1")))
