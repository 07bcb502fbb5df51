"""
app/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and initializes the Firebase Admin SDK (Firestore DB) on first use.
Routers get the Firestore client through the `get_db` dependency so it can be swapped in tests.
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    firebase_cred_file: str = Field('firebase_service_account.json')
    firebase_project_id: Optional[str] = Field(None)
    firebase_collection_prefix: str = Field('', description="Prepended to every collection name")

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    debug: bool = False
    log_level: str = 'INFO'
    allowed_origins: str = '*'  # Comma-separated list or '*' for all
    allow_mock_tokens: bool = False  # development only

    def origins(self) -> list[str]:
        if not self.allowed_origins or self.allowed_origins.strip() == '*':
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(',') if o.strip()]

    def env_credentials(self) -> Optional[dict]:
        """Service-account dict built from env vars, or None when any piece is missing."""
        fields = [
            self.firebase_private_key_id,
            self.firebase_private_key,
            self.firebase_client_email,
            self.firebase_client_id,
            self.firebase_auth_uri,
            self.firebase_token_uri,
            self.firebase_auth_provider_x509_cert_url,
            self.firebase_client_x509_cert_url,
        ]
        if not all(fields):
            return None
        return {
            "type": "service_account",
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            # Cloud Run env vars carry escaped newlines
            "private_key": self.firebase_private_key.replace("\\n", "\n"),
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.firebase_client_x509_cert_url,
        }


# Load settings from environment (.env file, etc.)
settings = Settings()


def collection_name(name: str) -> str:
    prefix = (settings.firebase_collection_prefix or "").strip()
    return f"{prefix}{name}" if prefix else name


USERS = collection_name("users")
CARTS = collection_name("carts")
PRODUCTS = collection_name("products")
ORDERS = collection_name("orders")


def get_firebase_app() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once and return the default app."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    cred_dict = settings.env_credentials()
    if cred_dict:
        # Use environment variables for Firebase credentials (Cloud Run)
        cred = credentials.Certificate(cred_dict)
    else:
        # Use service account file (local development)
        cred = credentials.Certificate(settings.firebase_cred_file)

    options = {'projectId': settings.firebase_project_id} if settings.firebase_project_id else None
    try:
        return firebase_admin.initialize_app(cred, options)
    except ValueError as e:
        if "already exists" in str(e):
            return firebase_admin.get_app()
        raise


@lru_cache(maxsize=1)
def _firestore_client():
    return firestore.client(get_firebase_app())


def get_db():
    """FastAPI dependency returning the Firestore client."""
    return _firestore_client()
