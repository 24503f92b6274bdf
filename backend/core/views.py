from rest_framework import viewsets
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .exceptions import NotFoundError


def envelope(data, *, results: int | None = None) -> dict:
    payload = {"status": "success"}
    if results is not None:
        payload["results"] = results
    payload["data"] = {"data": data}
    return payload


class EnvelopeModelViewSet(viewsets.ModelViewSet):
    """
    Generic get-all / get-one / create / update / delete handlers.

    Every resource in the API is served through this class so responses share
    the ``{"status": "success", "data": {"data": ...}}`` shape; list responses
    are shaped by the paginator.
    """

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        if self.paginator is None:
            response.data = envelope(response.data, results=len(response.data))
        return response

    def retrieve(self, request, *args, **kwargs):
        response = super().retrieve(request, *args, **kwargs)
        response.data = envelope(response.data)
        return response

    def create(self, request, *args, **kwargs):
        response = super().create(request, *args, **kwargs)
        response.data = envelope(response.data)
        return response

    def update(self, request, *args, **kwargs):
        response = super().update(request, *args, **kwargs)
        response.data = envelope(response.data)
        return response

    def apply_query_alias(self, request, **params):
        """Overwrite query parameters before running a standard handler."""
        query = request._request.GET.copy()
        for key, value in params.items():
            query[key] = value
        request._request.GET = query


class RouteNotFoundView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def _not_found(self, request, *args, **kwargs):
        raise NotFoundError(f"Can't find {request.path} on this server!")

    get = post = put = patch = delete = _not_found
