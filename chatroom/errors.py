# chatroom/errors.py
# Each error carries the HTTP status it maps to.


class ChatError(Exception):
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"detail": self.detail}


class ValidationError(ChatError):
    """Malformed or missing input, with one entry per offending field."""

    status_code = 422

    def __init__(self, violations: list[dict[str, str]]) -> None:
        fields = ", ".join(v["field"] for v in violations)
        super().__init__(f"invalid fields: {fields}")
        self.violations = violations

    def to_dict(self) -> dict:
        return {"detail": self.detail, "violations": self.violations}


class UnprocessableEntity(ChatError):
    status_code = 422


class Conflict(ChatError):
    status_code = 409


class NotFound(ChatError):
    status_code = 404


class Forbidden(ChatError):
    # the HTTP contract reports non-author mutations as 401
    status_code = 401


class StoreError(ChatError):
    status_code = 500
