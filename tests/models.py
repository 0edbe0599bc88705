"""Models used across the restform tests."""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, JSON, String, Table, Text, TypeDecorator
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restform.models.base import Base, Pivot, RestfulModel, TimestampMixin

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base, TimestampMixin, RestfulModel):
    """User whose primary key is not called id."""

    __tablename__ = "users"

    allowed_fields = (
        "user_id",
        "email",
        "display_name",
        "last_login_at",
        "preferences",
        "created_at",
        "updated_at",
    )

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    preferences: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Relationships
    posts: Mapped[list["Post"]] = relationship(
        "Post", back_populates="author", cascade="all, delete-orphan"
    )
    roles: Mapped[list["Role"]] = relationship(
        "Role", secondary=user_roles, back_populates="users"
    )
    profile: Mapped[Optional["Profile"]] = relationship(
        "Profile", back_populates="user", uselist=False
    )

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id!r}, email={self.email!r})>"


class Role(Base, RestfulModel):
    """Role whose primary key is already called id."""

    __tablename__ = "roles"

    allowed_fields = ("id", "role_name")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    role_name: Mapped[str] = mapped_column(String(100), nullable=False)
    internal_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    users: Mapped[list["User"]] = relationship(
        "User", secondary=user_roles, back_populates="roles"
    )


class Post(Base, TimestampMixin, RestfulModel):
    """Post with a date kept in a text column."""

    __tablename__ = "posts"

    allowed_fields = ("id", "title", "published_on", "author_id", "created_at")
    dates = ("published_on",)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    published_on: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    author: Mapped["User"] = relationship("User", back_populates="posts")


class Profile(Base, RestfulModel):
    """One-to-one extension of a user."""

    __tablename__ = "profiles"

    allowed_fields = ("bio", "birthday")

    profile_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    birthday: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="profile")


class Team(Base, RestfulModel):
    """Team whose members are reached through an association object."""

    __tablename__ = "teams"

    allowed_fields = ("id", "name")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    memberships: Mapped[list["TeamMembership"]] = relationship(
        "TeamMembership", back_populates="team", cascade="all, delete-orphan"
    )


class TeamMembership(Base, Pivot):
    """Join row between a team and a user."""

    __tablename__ = "team_memberships"

    team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True
    )
    member_role: Mapped[str] = mapped_column(String(50), nullable=False, default="member")

    team: Mapped["Team"] = relationship("Team", back_populates="memberships")
    user: Mapped["User"] = relationship("User")


class PostTranslation(Base, RestfulModel):
    """Model keyed by a composite primary key."""

    __tablename__ = "post_translations"

    allowed_fields = ("post_id", "locale", "title")

    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    locale: Mapped[str] = mapped_column(String(10), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)


class UTCDateTime(TypeDecorator):
    """DateTime that always stores UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class Event(Base, RestfulModel):
    """Model with a date held in a custom column type."""

    __tablename__ = "events"

    allowed_fields = ("id", "starts_at")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    starts_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
