"""Firestore client for the storefront document store."""

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from config import settings

logger = logging.getLogger("storefront")

_firebase_app = None
_db = None


def _get_firebase_app():
    """Get or initialize the Firebase Admin app."""
    global _firebase_app

    if _firebase_app is not None:
        return _firebase_app

    try:
        _firebase_app = firebase_admin.get_app()
        return _firebase_app
    except ValueError:
        pass

    if settings.firebase_credentials_path:
        cred = credentials.Certificate(settings.firebase_credentials_path)
    else:
        cred = credentials.ApplicationDefault()

    options = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id

    _firebase_app = firebase_admin.initialize_app(cred, options or None)
    logger.info("Firebase Admin SDK initialized")
    return _firebase_app


def get_db():
    """Return the shared Firestore client, creating it on first use."""
    global _db

    if _db is None:
        _db = firestore.client(app=_get_firebase_app())
    return _db
