"""Errors raised while synthesizing a circuit."""


class SynthesisError(Exception):
    """Base class for gadget synthesis failures."""


class AssignmentMissing(SynthesisError):
    """A witness value was needed but the hint is absent."""

    def __init__(self, message: str = "an assignment for a variable could not be computed"):
        super().__init__(message)


class DivisionByZero(SynthesisError):
    """A field inverse of zero was requested."""

    def __init__(self, message: str = "division by zero"):
        super().__init__(message)


class Unsatisfiable(SynthesisError):
    """The requested gadget can never be satisfied."""

    def __init__(self, message: str = "unsatisfiable constraint system"):
        super().__init__(message)
