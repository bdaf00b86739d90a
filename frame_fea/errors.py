# frame_fea/errors.py
"""Exception types raised by the frame solver."""


class FEAError(Exception):
    """Base class for all solver errors."""
    pass


class ContractViolationError(FEAError, ValueError):
    """Raised when a caller passes arguments of the wrong shape or order."""
    pass


class MissingReferenceError(FEAError, LookupError):
    """Raised when an element or load refers to an id that is not in the model."""

    def __init__(self, kind: str, ref_id: int, owner: str = ""):
        self.kind = kind
        self.ref_id = ref_id
        self.owner = owner
        where = f" (referenced by {owner})" if owner else ""
        super().__init__(f"{kind} {ref_id} does not exist in the model{where}")


class SingularMatrixError(FEAError, RuntimeError):
    """Raised when the reduced stiffness matrix cannot be solved."""
    pass


class DegenerateGeometryError(FEAError, ValueError):
    """Raised when element geometry cannot define a length or local axes."""
    pass


class ZeroLengthElementError(DegenerateGeometryError):
    """Raised when an element connects two coincident nodes."""
    pass
