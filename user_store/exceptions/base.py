from typing import Any, Dict, Optional


class UserStoreError(Exception):
    """Root of every error the user store raises.

    ``context`` holds key/value details (table, key, field) that are rendered
    after the message, so log lines carry them without callers formatting
    them. The boto3 or parsing error that triggered this one, if any, is kept
    in ``original_error``.
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.context = dict(context) if context else {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} (Context: {details})"

    def __repr__(self) -> str:
        fields = f"message={self.message!r}, original_error={self.original_error!r}, context={self.context!r}"
        return f"{type(self).__name__}({fields})"
