from __future__ import annotations

from django.conf import settings
from django.core.mail import send_mail

from accounts.models import User


def _first_name(user: User) -> str:
    return (user.name or user.email).split(" ")[0]


def send_welcome_email(*, user: User, profile_url: str):
    body_lines = [
        f"Hi {_first_name(user)},",
        "",
        "Welcome to Trailpass, we're glad to have you.",
        f"Upload a photo and review your details here: {profile_url}",
        "",
        "The Trailpass Team",
    ]
    send_mail(
        "Welcome to the Trailpass family!",
        "\n".join(body_lines),
        settings.DEFAULT_FROM_EMAIL,
        [user.email],
        fail_silently=False,
    )


def send_password_reset_email(*, user: User, reset_url: str):
    minutes = settings.PASSWORD_RESET_TOKEN_MINUTES
    body_lines = [
        f"Hi {_first_name(user)},",
        "",
        "Forgot your password? Submit a PATCH request with your new password and",
        f"password_confirm to: {reset_url}",
        "",
        f"This link is valid for {minutes} minutes. If you didn't request it, ignore this email.",
        "",
        "The Trailpass Team",
    ]
    send_mail(
        f"Your password reset token (valid for {minutes} min)",
        "\n".join(body_lines),
        settings.DEFAULT_FROM_EMAIL,
        [user.email],
        fail_silently=False,
    )
