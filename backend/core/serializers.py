class DynamicFieldsMixin:
    """Limit GET output to the comma separated ``fields`` query parameter."""

    always_included = ("id",)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        request = self.context.get("request")
        if request is None or request.method != "GET":
            return
        requested = request.query_params.get("fields")
        if not requested:
            return
        allowed = {name.strip() for name in requested.split(",") if name.strip()}
        allowed.update(self.always_included)
        for name in set(self.fields) - allowed:
            self.fields.pop(name)
