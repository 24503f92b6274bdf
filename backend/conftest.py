import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    counter = {"value": 0}

    def _make_user(role=User.USER, **overrides):
        counter["value"] += 1
        email = overrides.pop("email", f"user{counter['value']}@example.com")
        return User.objects.create_user(
            email=email,
            password=overrides.pop("password", "examplepass"),
            name=overrides.pop("name", f"Test User {counter['value']}"),
            role=role,
            **overrides,
        )

    return _make_user


@pytest.fixture
def admin_user(make_user):
    return make_user(role=User.ADMIN, email="admin@example.com", name="Ada Admin")
