from __future__ import annotations

import re

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.filters import OrderingFilter
from rest_framework.pagination import BasePagination
from rest_framework.response import Response

RANGE_LOOKUPS = ["exact", "gte", "gt", "lte", "lt"]
RESERVED_PARAMS = {"page", "sort", "limit", "fields"}

_BRACKET_PARAM = re.compile(r"^(?P<field>\w+)\[(?P<lookup>gte|gt|lte|lt)\]$")


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


class BracketFilterBackend(DjangoFilterBackend):
    """
    django-filter backend that understands ``price[gte]=500`` style parameters.

    Bracketed comparisons are rewritten to the ``price__gte`` names generated by
    ``filterset_fields``; paging, sorting and field-selection parameters are
    never treated as filters.
    """

    def get_filterset_kwargs(self, request, queryset, view):
        kwargs = super().get_filterset_kwargs(request, queryset, view)
        data = kwargs["data"].copy()
        for key in list(data.keys()):
            if key in RESERVED_PARAMS:
                data.pop(key)
                continue
            match = _BRACKET_PARAM.match(key)
            if match:
                values = data.pop(key)
                data.setlist(f"{match['field']}__{match['lookup']}", values)
        kwargs["data"] = data
        return kwargs


class SortFilter(OrderingFilter):
    """``sort=-price,ratings_average``; falls back to the view's ``ordering``."""

    ordering_param = "sort"


class PagePagination(BasePagination):
    """Plain ``page``/``limit`` slicing. Out-of-range pages yield an empty list."""

    page_query_param = "page"
    limit_query_param = "limit"
    default_limit = 100

    def paginate_queryset(self, queryset, request, view=None):
        self.page = _positive_int(request.query_params.get(self.page_query_param), 1)
        self.limit = _positive_int(
            request.query_params.get(self.limit_query_param), self.default_limit
        )
        offset = (self.page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_paginated_response(self, data):
        return Response({"status": "success", "results": len(data), "data": {"data": data}})

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "results": {"type": "integer"},
                "data": {"type": "object", "properties": {"data": schema}},
            },
        }
