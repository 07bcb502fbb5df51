from fastapi.testclient import TestClient

from app import config
from app.config import Settings, get_db
from app.main import app


class TestSettings:
    def test_origins(self):
        assert Settings(allowed_origins="*").origins() == ["*"]
        assert Settings(allowed_origins="https://a.example, https://b.example ,").origins() == [
            "https://a.example",
            "https://b.example",
        ]

    def test_env_credentials_need_every_field(self):
        assert Settings(firebase_private_key="k").env_credentials() is None

    def test_env_credentials(self):
        s = Settings(
            firebase_project_id="shop-dev",
            firebase_private_key_id="kid",
            firebase_private_key="-----BEGIN-----\\nabc\\n-----END-----",
            firebase_client_email="svc@shop-dev.iam.gserviceaccount.com",
            firebase_client_id="123",
            firebase_auth_uri="https://accounts.google.com/o/oauth2/auth",
            firebase_token_uri="https://oauth2.googleapis.com/token",
            firebase_auth_provider_x509_cert_url="https://www.googleapis.com/oauth2/v1/certs",
            firebase_client_x509_cert_url="https://www.googleapis.com/robot/v1/metadata/x509/svc",
        )
        cred = s.env_credentials()
        assert cred["type"] == "service_account"
        assert cred["project_id"] == "shop-dev"
        assert cred["private_key"] == "-----BEGIN-----\nabc\n-----END-----"

    def test_collection_prefix(self, monkeypatch):
        monkeypatch.setattr(config.settings, "firebase_collection_prefix", "staging_")
        assert config.collection_name("carts") == "staging_carts"
        monkeypatch.setattr(config.settings, "firebase_collection_prefix", "")
        assert config.collection_name("carts") == "carts"


class TestErrorHandling:
    def test_root(self, client):
        assert client.get("/").json() == {"message": "Seller Shop API running"}

    def test_unexpected_error_is_500(self, client, db):
        def _broken():
            raise RuntimeError("firestore unavailable")

        app.dependency_overrides[get_db] = _broken
        response = TestClient(app, raise_server_exceptions=False).get("/api/carts")
        assert response.status_code == 500
        assert response.json() == {"detail": "Server Error"}
