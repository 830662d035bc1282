"""Domain errors raised by the ledgers and workflows.

Each error carries an HTTP status and a stable ``code`` so clients can tell
"feed your pet" apart from "not your pet" apart from "try again".
"""


class FrothPetError(Exception):
    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FrothPetError):
    """Bad or missing input."""
    status_code = 400
    code = "validation_error"


class InvalidInputError(ValidationError):
    code = "invalid_input"


class NotFoundError(FrothPetError):
    status_code = 404
    code = "not_found"


class ForbiddenError(FrothPetError):
    """Caller does not own the resource."""
    status_code = 403
    code = "forbidden"


class InsufficientEnergyError(FrothPetError):
    status_code = 400
    code = "insufficient_energy"


class InsufficientInventoryError(FrothPetError):
    status_code = 400
    code = "insufficient_inventory"


class AlreadyFullError(FrothPetError):
    status_code = 400
    code = "already_full"


class ConflictError(FrothPetError):
    """A concurrent update won; retry the whole operation."""
    status_code = 409
    code = "conflict"
