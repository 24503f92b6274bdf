from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication


class PasswordAwareJWTAuthentication(JWTAuthentication):
    """
    SimpleJWT authentication that also reads the ``jwt`` cookie.

    Tokens are rejected when their user is gone or deactivated, or when the
    password changed after the token was issued.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(settings.JWT_COOKIE_NAME)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        user = self.get_user(validated_token)

        issued_at = validated_token.get("iat")
        if issued_at is not None and user.changed_password_after(int(issued_at)):
            raise AuthenticationFailed(
                "User recently changed password. Please log in again!",
                code="password_changed",
            )
        return user, validated_token

    def get_user(self, validated_token):
        try:
            return super().get_user(validated_token)
        except AuthenticationFailed as exc:
            raise AuthenticationFailed(
                "The user belonging to this token no longer exists.",
                code="user_not_found",
            ) from exc
