import hashlib
import secrets
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from accounts.models import User


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def issue_password_reset_token(user: User, *, lifetime: timedelta | None = None) -> str:
    """Store the hash of a fresh reset token on the user and return the plaintext."""

    if lifetime is None:
        lifetime = timedelta(minutes=settings.PASSWORD_RESET_TOKEN_MINUTES)
    raw_token = secrets.token_hex(32)
    user.password_reset_token = _hash_token(raw_token)
    user.password_reset_expires = timezone.now() + lifetime
    user.save(update_fields=["password_reset_token", "password_reset_expires"])
    return raw_token


def find_user_by_reset_token(raw_token: str) -> User | None:
    """Return the active user owning an unexpired reset token; otherwise None."""
    if not raw_token:
        return None
    return (
        User.objects.active()
        .filter(
            password_reset_token=_hash_token(raw_token),
            password_reset_expires__gt=timezone.now(),
        )
        .first()
    )
