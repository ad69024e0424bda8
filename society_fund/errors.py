"""
Error Taxonomy

Exceptions raised by the store, validation and export layers. Each carries a
machine-readable ``kind`` that the API layer returns to clients.
"""


class SocietyFundError(Exception):
    """Base class for all application errors."""

    kind = "error"
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.detail}


class ValidationError(SocietyFundError):
    """Missing or invalid required field, rejected before any store call."""

    kind = "validation_error"
    status_code = 400

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NotFoundError(SocietyFundError):
    """Update, delete or lookup targeting an identifier absent from the store."""

    kind = "not_found"
    status_code = 404


class StoreConnectionError(SocietyFundError):
    """Underlying store unreachable or misconfigured."""

    kind = "store_unavailable"
    status_code = 503


class ExportAssemblyError(SocietyFundError):
    """Document builder failed while assembling an export."""

    kind = "export_failed"
    status_code = 500
