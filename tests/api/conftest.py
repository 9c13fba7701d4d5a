from __future__ import annotations

from dataclasses import dataclass

import pytest

pytest.importorskip("fastapi")

from fastapi.testclient import TestClient

from src.mediashelf.auth.auth_service import TokenIdentityService
from src.mediashelf.config import Settings, load_config
from src.mediashelf.dependencies import build_services
from src.mediashelf.main import create_app
from tests.helpers.stack import DummyPasswordVerifier, DummyStorage

SIGNING_KEY = "test-signing-key"


@dataclass
class ApiHarness:
    client: TestClient
    storage: DummyStorage
    identity: TokenIdentityService

    def headers(self, user_id: str = "alice") -> dict[str, str]:
        return {"Authorization": f"Bearer {self.identity.issue_token(user_id)}"}


@pytest.fixture
def api(tmp_path) -> ApiHarness:
    settings = Settings(
        database_url="sqlite://",
        token_signing_key=SIGNING_KEY,
        quota_bytes=1000,
        media_root=tmp_path / "media",
        cloudinary_url=None,
        locked_credentials_path=None,
    )
    config = load_config(settings)
    storage = DummyStorage()
    services = build_services(
        config, storage=storage, password_verifier=DummyPasswordVerifier({"alice": "s3cret"})
    )
    app = create_app(config, services=services, run_sweeper=False)
    with TestClient(app) as client:
        yield ApiHarness(client=client, storage=storage, identity=TokenIdentityService(signing_key=SIGNING_KEY))
