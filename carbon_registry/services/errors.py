"""Typed failures raised by the registry services.

Four kinds, each a base class the HTTP layer maps to a status code:

  NotFoundError       referenced entity absent
  UnauthorizedError   caller lacks admin / owner / active-verifier role
  InvalidInputError   malformed or out-of-range argument
  StateConflictError  not permitted in the current lifecycle state

Every concrete error carries a stable ``code`` (its class name without
the ``Error`` suffix) that clients can switch on. Nothing here is retried
by the services; a rejected call leaves the ledger untouched.
"""

from __future__ import annotations


class RegistryError(Exception):
    code = "RegistryError"

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        name = cls.__name__
        cls.code = name[: -len("Error")] if name.endswith("Error") else name


class NotFoundError(RegistryError):
    pass


class UnauthorizedError(RegistryError):
    pass


class InvalidInputError(RegistryError, ValueError):
    pass


class StateConflictError(RegistryError):
    pass


# --- Unauthorized ---


class NotAdminError(UnauthorizedError):
    pass


class NotOwnerError(UnauthorizedError):
    pass


class NotAuthorizedVerifierError(UnauthorizedError):
    pass


class SelfAuthorizationError(UnauthorizedError):
    pass


# --- InvalidInput ---


class InvalidCategoryError(InvalidInputError):
    pass


class InvalidDateRangeError(InvalidInputError):
    pass


class EmptyFieldError(InvalidInputError):
    pass


class InvalidPeriodError(InvalidInputError):
    pass


class ZeroCreditsError(InvalidInputError):
    pass


class InvalidQuantityError(InvalidInputError):
    pass


class InvalidPriceError(InvalidInputError):
    pass


class InvalidVintageError(InvalidInputError):
    pass


class EmptyReasonError(InvalidInputError):
    pass


class SelfBeneficiaryError(InvalidInputError):
    pass


class EmptyUrlError(InvalidInputError):
    pass


class InvalidEvidenceError(InvalidInputError):
    pass


class InvalidAmountError(InvalidInputError):
    pass


# --- StateConflict ---


class ProjectNotPendingError(StateConflictError):
    pass


class NotVerifiedError(StateConflictError):
    pass


class ProjectInactiveError(StateConflictError):
    pass


class InsufficientAvailableCreditsError(StateConflictError):
    pass


class BatchNotAvailableError(StateConflictError):
    pass


class InsufficientRemainingError(StateConflictError):
    pass


class PaymentFailedError(StateConflictError):
    pass


class NoHoldingError(StateConflictError):
    pass


class InsufficientBalanceError(StateConflictError):
    pass


class CertificateAlreadySetError(StateConflictError):
    pass
