"""
Authentication and identity related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
import logging

from jose import ExpiredSignatureError, JWTError

from notes_api.core.config import Settings, get_settings
from notes_api.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    TokenExpiredOrInvalid,
    Unauthenticated,
    ValidationError,
)
from notes_api.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    needs_rehash,
    verify_password,
)
from notes_api.domain.entities import Account, Identity
from notes_api.repositories.document_repository import DocumentRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass
class AuthResult:
    account: Account
    token: str


def _mask_email(email: str) -> str:
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}" if domain else "***"


@dataclass
class AuthService:
    """Handles registration, sign-in, token verification and password changes."""

    repository: DocumentRepository
    settings: Settings = field(default_factory=get_settings)

    # -------------------------------------- helpers --------------------------------------
    def _issue_token(self, account: Account) -> str:
        ttl = timedelta(days=max(1, self.settings.token_ttl_days))
        return create_access_token(account.id, account.email, self.settings.jwt_secret, ttl)

    @staticmethod
    def _check_new_password(password: str, label: str = "Password") -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long")

    # -------------------------------------- registration --------------------------------------
    def register(self, name: str, email: str, password: str) -> AuthResult:
        name = (name or "").strip()
        email = (email or "").strip()
        password = password or ""
        if not (name and email and password):
            raise ValidationError("Name, email and password are required")
        self._check_new_password(password)
        if self.repository.find_account_by_email(email):
            raise DuplicateEmail("An account with this email already exists")
        # re-checked under the store lock
        account = self.repository.create_account_if_email_free(name, email, hash_password(password))
        if account is None:
            raise DuplicateEmail("An account with this email already exists")
        logger.info("Registered account %s", account.id)
        return AuthResult(account=account, token=self._issue_token(account))

    # -------------------------------------- sign-in --------------------------------------
    def authenticate(self, email: str, password: str) -> AuthResult:
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Email and password are required")
        account = self.repository.find_account_by_email(email)
        # same error for unknown email and wrong password
        if not account or not verify_password(password, account.password_hash):
            logger.info("Failed sign-in for %s", _mask_email(email))
            raise InvalidCredentials()
        if needs_rehash(account.password_hash):
            account = self.repository.update_account_password_hash(account.id, hash_password(password)) or account
        return AuthResult(account=account, token=self._issue_token(account))

    # -------------------------------------- tokens --------------------------------------
    def verify_token(self, token: str | None) -> Identity:
        token_value = (token or "").strip()
        if not token_value:
            raise Unauthenticated("Access token required")
        try:
            claims = decode_access_token(token_value, self.settings.jwt_secret)
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise TokenExpiredOrInvalid()
        except JWTError as exc:
            logger.info("Rejected token: %s", exc)
            raise TokenExpiredOrInvalid()
        try:
            account_id = int(claims["sub"])
            email = str(claims["email"])
        except (KeyError, TypeError, ValueError):
            logger.info("Rejected token with incomplete claims")
            raise TokenExpiredOrInvalid()
        if account_id <= 0:
            raise TokenExpiredOrInvalid()
        return Identity(account_id=account_id, email=email)

    # -------------------------------------- password --------------------------------------
    def change_password(self, account_id: int, current_password: str, new_password: str) -> Account:
        current_password = current_password or ""
        new_password = new_password or ""
        if not (current_password and new_password):
            raise ValidationError("Current and new password are required")
        account = self.repository.find_account_by_id(account_id)
        if not account:
            raise NotFound("Account not found")
        if not verify_password(current_password, account.password_hash):
            raise InvalidCredentials("Current password is incorrect")
        self._check_new_password(new_password, label="New password")
        updated = self.repository.update_account_password_hash(account_id, hash_password(new_password))
        if not updated:
            raise NotFound("Account not found")
        logger.info("Password changed for account %s", account_id)
        return updated
