# file: OSAKEL/core/firebase.py

import os
import json
import logging
import subprocess
from contextlib import contextmanager
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore

from OSAKEL.core.config import CREDENTIAL_SOURCE, FIREBASE_APP_NAME, FIREBASE_PROJECT_ID

logger = logging.getLogger("core.firebase")
logger.setLevel(logging.INFO)


class FirebaseInitError(RuntimeError):
    """Raised when the Admin SDK cannot be initialised."""


# ------------------------------
# Credentials
# ------------------------------
def load_credential(source: Optional[str]):
    """
    Build a firebase_admin credential.

    - file path            -> service account certificate
    - raw JSON string      -> service account certificate from dict
    - nothing / not found  -> default application credentials
    """
    if source and os.path.exists(source):
        logger.info("Loading Firebase credentials from file: %s", source)
        return credentials.Certificate(source)

    if source and source.lstrip().startswith("{"):
        logger.info("Loading Firebase credentials from raw JSON string")
        try:
            return credentials.Certificate(json.loads(source))
        except ValueError as e:
            raise FirebaseInitError(f"Invalid service account JSON: {e}") from e

    if source:
        logger.warning("Service account key not found at %s, trying default credentials", source)
    else:
        logger.info("No service account configured, trying default credentials")
    return credentials.ApplicationDefault()


def resolve_project_id(explicit: Optional[str] = None) -> Optional[str]:
    """Explicit id, then FIREBASE_PROJECT_ID, then the active Firebase CLI project."""
    if explicit:
        return explicit
    if FIREBASE_PROJECT_ID:
        return FIREBASE_PROJECT_ID

    try:
        out = subprocess.run(
            ["firebase", "use", "--json"],
            capture_output=True,
            text=True,
            check=True,
            timeout=30,
        ).stdout
        project_id = json.loads(out).get("result")
    except (OSError, subprocess.SubprocessError, ValueError) as e:
        logger.debug("Firebase CLI project lookup failed: %s", e)
        return None

    if isinstance(project_id, str) and project_id:
        logger.info("Using Firebase CLI project: %s", project_id)
        return project_id
    return None


# ------------------------------
# Session
# ------------------------------
def init_app(credential_source: Optional[str] = None, project_id: Optional[str] = None,
             name: str = FIREBASE_APP_NAME):
    source = credential_source or CREDENTIAL_SOURCE
    try:
        cred = load_credential(source)
        options = {}
        project = resolve_project_id(project_id)
        if project:
            options["projectId"] = project
        app = firebase_admin.initialize_app(cred, options, name=name)
    except FirebaseInitError:
        raise
    except Exception as e:
        logger.exception("Failed to initialize Firebase: %s", e)
        raise FirebaseInitError(str(e)) from e

    logger.info("🔥 Firebase initialized with project: %s", app.project_id)
    return app


@contextmanager
def firestore_session(credential_source: Optional[str] = None, project_id: Optional[str] = None,
                      name: str = FIREBASE_APP_NAME):
    """
    Yield a Firestore client bound to a dedicated Admin SDK app.
    The app is deleted when the block exits.
    """
    app = init_app(credential_source, project_id, name=name)
    try:
        try:
            db = firestore.client(app)
        except Exception as e:
            raise FirebaseInitError(str(e)) from e
        logger.info("🔥 Firestore client project: %s", db.project)
        yield db
    finally:
        firebase_admin.delete_app(app)


__all__ = ["FirebaseInitError", "load_credential", "resolve_project_id", "init_app", "firestore_session"]
