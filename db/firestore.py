# backend/db/firestore.py
import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

from config import config

logger = logging.getLogger(__name__)

# Cached client, created on first use
firestore_client = None


def initialize_firestore():
    """
    Initializes the Firebase Admin SDK once per process.
    Uses application default credentials on Cloud Run/App Engine and a
    service account key file locally when one exists.
    """
    if firebase_admin._apps:
        return

    project_id = os.getenv('GOOGLE_CLOUD_PROJECT')
    options = {'projectId': project_id} if project_id else None

    if os.getenv('K_SERVICE') or os.getenv('GAE_ENV'):
        logger.info(f"Initializing Firebase Admin SDK with application default credentials (project: {project_id})")
        firebase_admin.initialize_app(options=options)
        return

    service_account_file = os.getenv('GOOGLE_SERVICE_ACCOUNT_FILE', 'serviceAccountKey.json')
    if os.path.exists(service_account_file):
        logger.info(f"Using service account key file: {service_account_file}")
        firebase_admin.initialize_app(credentials.Certificate(service_account_file), options=options)
    else:
        logger.info("No service account key file found, falling back to application default credentials")
        firebase_admin.initialize_app(options=options)


def get_firestore_client():
    """
    Returns a Firestore client for the configured database.
    """
    initialize_firestore()
    database_name = config.FIRESTORE_DATABASE
    if database_name and database_name != '(default)':
        return firestore.client(database_id=database_name)
    return firestore.client()


def get_or_create_firestore_client():
    """
    Returns the cached Firestore client, creating it if necessary.
    """
    global firestore_client
    if firestore_client is None:
        firestore_client = get_firestore_client()
    return firestore_client
