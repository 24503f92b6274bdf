from django.contrib.auth import authenticate
from rest_framework import serializers

from core.exceptions import AuthenticationError, ValidationError
from core.serializers import DynamicFieldsMixin

from .models import User


class UserSerializer(DynamicFieldsMixin, serializers.ModelSerializer):
    """Expose the public fields for the custom user model."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "photo", "role", "is_active"]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "photo"]
        read_only_fields = fields


def _validate_unique_email(value: str, *, exclude_pk=None) -> str:
    email = value.lower()
    existing = User.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        existing = existing.exclude(pk=exclude_pk)
    if existing.exists():
        raise serializers.ValidationError("A user with this email already exists.")
    return email


class PasswordPairMixin:
    def validate(self, attrs):
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError({"password_confirm": "Passwords are not the same!"})
        return attrs


class SignupSerializer(PasswordPairMixin, serializers.ModelSerializer):
    """Validate and create a user during signup. The role is always ``user``."""

    password = serializers.CharField(write_only=True, min_length=8)
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ["name", "email", "photo", "password", "password_confirm"]
        extra_kwargs = {"photo": {"required": False}}

    def validate_email(self, value: str) -> str:
        return _validate_unique_email(value)

    def create(self, validated_data):
        validated_data.pop("password_confirm")
        return User.objects.create_user(
            email=validated_data.pop("email"),
            password=validated_data.pop("password"),
            role=User.USER,
            **validated_data,
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate(self, attrs):
        email = (attrs.get("email") or "").strip().lower()
        password = attrs.get("password") or ""
        if not email or not password:
            raise ValidationError("Please provide email and password")

        user = authenticate(self.context.get("request"), username=email, password=password)
        if user is None:
            raise AuthenticationError("Incorrect email or password")
        attrs["user"] = user
        return attrs


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(PasswordPairMixin, serializers.Serializer):
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirm = serializers.CharField(write_only=True)


class UpdatePasswordSerializer(PasswordPairMixin, serializers.Serializer):
    """Validate and update the authenticated user's password."""

    password_current = serializers.CharField(write_only=True)
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirm = serializers.CharField(write_only=True)

    def validate_password_current(self, value):
        user = self.context["request"].user
        if not user.check_password(value):
            raise AuthenticationError("Your current password is wrong.")
        return value

    def save(self, **kwargs):
        user = self.context["request"].user
        user.set_password(self.validated_data["password"])
        user.save(update_fields=["password", "password_changed_at"])
        return user


class UpdateMeSerializer(serializers.ModelSerializer):
    """Update the mutable fields on the authenticated user's profile."""

    PASSWORD_FIELDS = {"password", "password_confirm", "password_current"}

    class Meta:
        model = User
        fields = ["name", "email"]

    def to_internal_value(self, data):
        if self.PASSWORD_FIELDS.intersection(data):
            raise ValidationError(
                "This route is not meant for password updates. Please use /update-password"
            )
        return super().to_internal_value(data)

    def validate_email(self, value: str) -> str:
        return _validate_unique_email(value, exclude_pk=self.instance.pk)


class AdminUserSerializer(DynamicFieldsMixin, serializers.ModelSerializer):
    """Admin view of a user. Passwords are never writable here."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "photo", "role", "is_active", "date_joined"]
        read_only_fields = ["id", "date_joined"]

    def validate_email(self, value: str) -> str:
        return _validate_unique_email(value, exclude_pk=getattr(self.instance, "pk", None))
