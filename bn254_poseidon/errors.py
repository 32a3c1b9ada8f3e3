"""Exceptions raised by the Poseidon implementation."""


class PoseidonError(Exception):
    """Base class for all errors raised by this package."""


class InvalidParametersError(PoseidonError, ValueError):
    """The provided parameters are invalid.

    Raised for malformed parameter tables, round indices outside the table,
    and states or hash inputs whose length matches no parameter set. These
    indicate a configuration or caller bug rather than bad user input.
    """


class ParseStringError(PoseidonError, ValueError):
    """The provided string is not a field element."""
