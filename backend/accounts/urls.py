from django.urls import path
from rest_framework.routers import SimpleRouter

from .api import (
    DeleteMeView,
    ForgotPasswordView,
    LoginView,
    LogoutView,
    MeView,
    RefreshView,
    ResetPasswordView,
    SignupView,
    UpdateMeView,
    UpdatePasswordView,
    UserViewSet,
)

router = SimpleRouter()
router.register(r"", UserViewSet, basename="user")

urlpatterns = [
    path("signup/", SignupView.as_view(), name="signup"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("refresh/", RefreshView.as_view(), name="token-refresh"),
    path("forgot-password/", ForgotPasswordView.as_view(), name="forgot-password"),
    path("reset-password/<str:token>/", ResetPasswordView.as_view(), name="reset-password"),
    path("me/", MeView.as_view(), name="me"),
    path("update-me/", UpdateMeView.as_view(), name="update-me"),
    path("delete-me/", DeleteMeView.as_view(), name="delete-me"),
    path("update-password/", UpdatePasswordView.as_view(), name="update-password"),
] + router.urls
