"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def fake_s3():
    """Empty in-memory S3 double."""
    from tests.fake_s3 import FakeS3Client

    return FakeS3Client()


@pytest.fixture
def store(fake_s3):
    """Versioned store over the in-memory S3 double."""
    from core.s3_uri import S3Location
    from store.versioned_store import VersionedObjectStore

    return VersionedObjectStore(fake_s3, S3Location(bucket="notes", key="todo.md"))
