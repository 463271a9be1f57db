"""Error taxonomy shared by repositories, the seeder and the Web API.

Repositories raise these unchanged; the API layer maps them to HTTP
status codes (see verbario.web.api).
"""


class VerbarioError(Exception):
    """Base class for all domain errors."""

    status_code = 500


class ValidationError(VerbarioError):
    """Raised when a required field is missing or malformed."""

    status_code = 400


class Conflict(ValidationError):
    """Raised when a write would violate a uniqueness constraint."""

    status_code = 409

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"A record with {field} '{value}' already exists")


class Forbidden(VerbarioError):
    """Raised when the supplied shared secret does not authorize a write."""

    status_code = 403

    def __init__(self, message: str = "Forbidden: Invalid password"):
        super().__init__(message)


class NotFound(VerbarioError):
    """Raised when no record matches the requested id."""

    status_code = 404

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class StoreUnavailable(VerbarioError):
    """Raised when the Record Store cannot be reached or opened."""

    status_code = 503


class ConfigError(VerbarioError):
    """Raised when required configuration is missing or invalid."""
