"""Error taxonomy for the suggestion pipeline.

None of these errors is allowed to reach the selection state machine or the
UI: adapters raise them, the dispatcher and session turn them into empty or
partial results.
"""


class DeskpilotError(Exception):
    """Base class for deskpilot errors."""


class AdapterFailure(DeskpilotError):
    """A single suggestion source was unreachable or errored."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class MalformedResponse(DeskpilotError):
    """A collaborator returned data that could not be parsed."""

    def __init__(self, operation: str, detail: str, raw: str | None = None):
        super().__init__(f"Malformed response from {operation}: {detail}")
        self.operation = operation
        self.detail = detail
        self.raw = raw


class NoActiveQuery(DeskpilotError):
    """A continuation or search was attempted without text or context."""
