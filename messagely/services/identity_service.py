"""
Registration, authentication and profile use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from messagely.core.config import Settings, get_settings
from messagely.core.security import hash_password, needs_rehash, verify_password
from messagely.domain.entities import UserProfile, UserSummary
from messagely.domain.errors import ConflictError, InvalidInputError, MessagelyError, NotFoundError
from messagely.domain.users import USERNAME_MAX_LENGTH, clean_registration, missing_fields
from messagely.repositories.sql_repository import SQLRepository
from messagely.services.session_service import issue_session

logger = logging.getLogger(__name__)


class InvalidCredentialsError(MessagelyError):
    """Raised by login when the username/password pair does not match."""


@dataclass
class IdentityService:
    """Owns the users table: registration, credential checks and profiles."""

    repository: SQLRepository = field(default_factory=SQLRepository)
    settings: Settings = field(default_factory=get_settings)

    # -------------------------------------- registration --------------------------------------
    def register(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
    ) -> UserProfile:
        data = clean_registration(
            {
                "username": username,
                "password": password,
                "first_name": first_name,
                "last_name": last_name,
                "phone": phone,
            }
        )
        missing = missing_fields(data)
        if missing:
            raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")
        if len(data["username"]) > USERNAME_MAX_LENGTH:
            raise InvalidInputError(f"Username must be at most {USERNAME_MAX_LENGTH} characters")

        password_hash = hash_password(data["password"], self.settings.password_work_factor)
        if self.repository.user_exists(data["username"]):
            logger.info("Registration rejected, username %s already taken", data["username"])
            raise ConflictError(f"Username '{data['username']}' is already taken")
        # a concurrent registration can still win between the check and the insert;
        # create_user turns the primary-key violation into the same ConflictError
        profile = self.repository.create_user(
            data["username"],
            password_hash,
            data["first_name"],
            data["last_name"],
            data["phone"],
        )
        logger.info("Registered user %s", profile.username)
        return profile

    # -------------------------------------- credentials --------------------------------------
    def authenticate(self, username: str, password: str) -> bool:
        """Return True only when the password matches the stored hash.

        Unknown users and wrong passwords both yield False so callers cannot
        tell them apart.
        """
        username = (username or "").strip()
        if not username or not password:
            return False
        stored = self.repository.get_password_hash(username)
        if stored is None:
            logger.info("Authentication failed for %s", username)
            return False
        if not verify_password(password, stored):
            logger.info("Authentication failed for %s", username)
            return False
        work_factor = self.settings.password_work_factor
        if needs_rehash(stored, work_factor):
            self.repository.update_password_hash(username, hash_password(password, work_factor))
            logger.info("Upgraded password hash parameters for %s", username)
        return True

    def update_login_timestamp(self, username: str) -> None:
        affected = self.repository.touch_last_login(username)
        if affected != 1:
            raise NotFoundError(f"No such user: {username}")

    def login(self, username: str, password: str) -> str:
        """Check credentials, record the login and hand back a bearer token."""
        if not self.authenticate(username, password):
            raise InvalidCredentialsError("Invalid user/password")
        username = username.strip()
        self.update_login_timestamp(username)
        logger.info("User %s logged in", username)
        return issue_session(username, settings=self.settings)

    def register_and_login(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
    ) -> str:
        profile = self.register(username, password, first_name, last_name, phone)
        return issue_session(profile.username, settings=self.settings)

    # -------------------------------------- profiles --------------------------------------
    def get_profile(self, username: str) -> UserProfile:
        profile = self.repository.get_user(username)
        if profile is None:
            raise NotFoundError(f"No such user: {username}")
        return profile

    def list_all(self) -> list[UserSummary]:
        """Every user's public summary, ordered by username."""
        return self.repository.list_users()
