from datetime import timedelta

from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as DjangoUserManager
from django.db import models
from django.utils import timezone


class UserManager(DjangoUserManager):
    def create_user(self, email=None, password=None, username=None, **extra_fields):
        email = self.normalize_email(email).lower()
        return super().create_user(username or email, email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, username=None, **extra_fields):
        email = self.normalize_email(email).lower()
        extra_fields.setdefault("role", User.ADMIN)
        return super().create_superuser(username or email, email, password, **extra_fields)

    def active(self):
        return self.filter(is_active=True)

    def get_active_by_email(self, email: str | None):
        if not email:
            return None
        return self.active().filter(email__iexact=email.strip()).first()


class User(AbstractUser):
    USER = "user"
    GUIDE = "guide"
    LEAD_GUIDE = "lead-guide"
    ADMIN = "admin"
    ROLES = [
        (USER, "User"),
        (GUIDE, "Guide"),
        (LEAD_GUIDE, "Lead guide"),
        (ADMIN, "Admin"),
    ]

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=120)
    photo = models.CharField(max_length=255, default="default.jpg")
    role = models.CharField(max_length=20, choices=ROLES, default=USER)
    password_changed_at = models.DateTimeField(null=True, blank=True)
    password_reset_token = models.CharField(max_length=64, blank=True)
    password_reset_expires = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    REQUIRED_FIELDS = ["email"]

    def __str__(self):
        return self.name or self.email

    def save(self, *args, **kwargs):
        # The login identifier is always the lower-cased email.
        if self.email:
            self.email = self.email.lower()
            self.username = self.email
        super().save(*args, **kwargs)

    def set_password(self, raw_password):
        super().set_password(raw_password)
        if self.pk:
            # Backdated one second so a token issued right after the change still verifies.
            self.password_changed_at = timezone.now() - timedelta(seconds=1)

    def changed_password_after(self, issued_at: int) -> bool:
        """True when the password changed after a token issued at ``issued_at`` (epoch seconds)."""
        if not self.password_changed_at:
            return False
        return issued_at < int(self.password_changed_at.timestamp())

    def clear_password_reset_token(self):
        self.password_reset_token = ""
        self.password_reset_expires = None
