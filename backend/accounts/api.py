import logging
from datetime import timedelta

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import AppError, AuthenticationError, NotFoundError, ValidationError
from core.views import EnvelopeModelViewSet, envelope

from .models import User
from .permissions import restrict_to
from .serializers import (
    AdminUserSerializer,
    ForgotPasswordSerializer,
    LoginSerializer,
    ResetPasswordSerializer,
    SignupSerializer,
    UpdateMeSerializer,
    UpdatePasswordSerializer,
    UserSerializer,
)
from .services.emails import send_password_reset_email, send_welcome_email
from .services.tokens import find_user_by_reset_token, issue_password_reset_token

logger = logging.getLogger(__name__)


def _set_jwt_cookie(response, token: str):
    response.set_cookie(
        settings.JWT_COOKIE_NAME,
        token,
        max_age=int(timedelta(days=settings.JWT_COOKIE_EXPIRES_DAYS).total_seconds()),
        httponly=True,
        secure=not settings.DEBUG,
        samesite="Lax",
    )


def _token_response(user, request, status_code=status.HTTP_200_OK) -> Response:
    """Issue a JWT pair for ``user``, mirror the access token into the cookie."""
    refresh = RefreshToken.for_user(user)
    access = str(refresh.access_token)
    response = Response(
        {
            "status": "success",
            "token": access,
            "refresh": str(refresh),
            "data": {"user": UserSerializer(user, context={"request": request}).data},
        },
        status=status_code,
    )
    _set_jwt_cookie(response, access)
    return response


class SignupView(APIView):
    """Create a new user account and issue an initial JWT pair."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        send_welcome_email(user=user, profile_url=request.build_absolute_uri("/me"))
        logger.info("User %s signed up", user.pk)
        return _token_response(user, request, status.HTTP_201_CREATED)


class LoginView(APIView):
    """Authenticate an existing user via email + password."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        return _token_response(serializer.validated_data["user"], request)


class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get(self, request, *args, **kwargs):
        response = Response({"status": "success"})
        response.delete_cookie(settings.JWT_COOKIE_NAME, samesite="Lax")
        return response


class RefreshView(APIView):
    """Exchange a refresh token for a new access token."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        raw_refresh = request.data.get("refresh")
        if not raw_refresh:
            raise ValidationError("Please provide a refresh token")
        try:
            refresh = RefreshToken(raw_refresh)
        except TokenError as exc:
            raise AuthenticationError("Invalid token. Please log in again") from exc

        user = User.objects.active().filter(pk=refresh.get("user_id")).first()
        if user is None:
            raise AuthenticationError("The user belonging to this token no longer exists.")
        access = str(refresh.access_token)
        response = Response({"status": "success", "token": access})
        _set_jwt_cookie(response, access)
        return response


class ForgotPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = User.objects.get_active_by_email(serializer.validated_data["email"])
        if user is None:
            raise NotFoundError("There is no user with that email address.")

        raw_token = issue_password_reset_token(user)
        reset_url = request.build_absolute_uri(f"/api/v1/users/reset-password/{raw_token}/")
        try:
            send_password_reset_email(user=user, reset_url=reset_url)
        except Exception as exc:
            logger.exception("Failed to send password reset email to user %s", user.pk)
            user.clear_password_reset_token()
            user.save(update_fields=["password_reset_token", "password_reset_expires"])
            raise AppError("There was an error sending the email. Try again later!") from exc
        return Response({"status": "success", "message": "Token sent to email!"})


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def patch(self, request, token, *args, **kwargs):
        user = find_user_by_reset_token(token)
        if user is None:
            raise ValidationError("Token is invalid or has expired!")

        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.set_password(serializer.validated_data["password"])
        user.clear_password_reset_token()
        user.save()
        return _token_response(user, request)


class MeView(APIView):
    """Return the serialized profile for the current authenticated user."""

    def get(self, request, *args, **kwargs):
        return Response(envelope(UserSerializer(request.user, context={"request": request}).data))


class UpdateMeView(APIView):
    def patch(self, request, *args, **kwargs):
        serializer = UpdateMeSerializer(instance=request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({"status": "success", "data": {"user": UserSerializer(user).data}})


class DeleteMeView(APIView):
    """Deactivate the current user. Their data is kept."""

    def delete(self, request, *args, **kwargs):
        request.user.is_active = False
        request.user.save(update_fields=["is_active"])
        logger.info("User %s deactivated their account", request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UpdatePasswordView(APIView):
    """Allow the current user to rotate their password after verifying the old one."""

    def patch(self, request, *args, **kwargs):
        serializer = UpdatePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return _token_response(user, request)


class UserViewSet(EnvelopeModelViewSet):
    """Admin management of users. Accounts are created through signup only."""

    queryset = User.objects.all()
    serializer_class = AdminUserSerializer
    permission_classes = [restrict_to(User.ADMIN)]
    http_method_names = ["get", "patch", "delete", "head", "options"]
    filterset_fields = ["role", "is_active"]
    ordering_fields = ["name", "email", "date_joined"]
    ordering = ["id"]
