import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

DOCUMENT_BACKEND = "memory"

FIREBASE_CREDENTIALS = ""
FIREBASE_PROJECT_ID = ""
FIREBASE_WEB_API_KEY = ""

STATE_DOC_PATH = "appState/mainState-test"
USERS_COLLECTION = "users"
BOOTSTRAP_ADMIN_EMAIL = ""
BOOTSTRAP_ADMIN_PASSWORD = ""

START_SYNC = bool(int(os.getenv("START_SYNC", "0")))
