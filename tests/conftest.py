"""Shared pytest fixtures for restform tests."""

from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from restform.case import CaseType
from restform.config import reset_settings
from restform.models.base import Base
from restform.registry import TransformerRegistry
from restform.transformer import RestfulTransformer
from tests.models import Post, Profile, Role, Team, User

SETTINGS_ENV = (
    "RESTFORM_RESPONSE_CASE_TYPE",
    "RESTFORM_NAIVE_TIMEZONE",
    "RESTFORM_MAX_DEPTH",
    "RESTFORM_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """Run every test against default settings, unaffected by the environment."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env file out of the settings
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Get a session factory bound to the in-memory engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def registry() -> TransformerRegistry:
    """Create a registry with one camelCase transformer for every test model."""
    registry = TransformerRegistry()
    transformer = RestfulTransformer(registry=registry, case_type=CaseType.CAMEL)
    for model_cls in (User, Role, Post, Profile, Team):
        registry.register(model_cls, transformer)
    return registry


@pytest.fixture
def transformer(registry) -> RestfulTransformer:
    """Get the camelCase transformer registered for User."""
    return registry.get(User)


@pytest.fixture
def snake_transformer() -> RestfulTransformer:
    """Create a snake_case transformer that also handles related models."""
    return RestfulTransformer(case_type=CaseType.SNAKE)


@pytest.fixture
def sample_user() -> User:
    """Create a transient user with a few loaded attributes."""
    return User(
        user_id=42,
        email="ada@example.com",
        display_name="Ada",
        password_hash="s3cret",
        preferences={"email_digest": True, "ui_theme": {"dark_mode": False}},
    )
