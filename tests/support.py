"""Shared helpers for API tests: isolated SQLite database and upload directory per test case."""

import shutil
import tempfile
import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jewelry_api.core.database import get_db
from jewelry_api.core.security import hash_password
from jewelry_api.core.uploads import UploadStore, get_upload_store
from jewelry_api.main import app
from jewelry_api.models import Base, User

# Small but valid-looking payloads; the store does not sniff content.
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 128
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 128


class ApiTestCase(unittest.TestCase):
    """Runs the app against an in-memory database and a temporary upload root."""

    max_file_size = 5 * 1024 * 1024

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        self.upload_root = tempfile.mkdtemp(prefix="jewelry-test-")
        self.store = UploadStore(self.upload_root, self.max_file_size)
        self.store.ensure_dirs()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_upload_store] = lambda: self.store
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()
        shutil.rmtree(self.upload_root, ignore_errors=True)

    def create_user(
        self,
        email: str,
        password: str = "Passw0rd",
        role: str = "user",
        name: str = "Test User",
    ) -> int:
        """Insert a user directly into the store and return its id."""
        db = self.Session()
        try:
            user = User(
                name=name,
                email=email.lower(),
                phone="5551234567",
                password_hash=hash_password(password),
                role=role,
            )
            db.add(user)
            db.commit()
            return user.id
        finally:
            db.close()

    def login(self, email: str, password: str = "Passw0rd") -> dict[str, str]:
        """Log in through the API and return an Authorization header."""
        resp = self.client.post("/api/auth/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    def stored_files(self, category: str) -> list[str]:
        return sorted(p.name for p in (self.store.root / category).iterdir())
