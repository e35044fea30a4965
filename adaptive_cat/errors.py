"""
Exceptions raised by the adaptive difficulty core.
"""


class ValidationError(ValueError):
    """Raised when an argument or configuration value is outside its valid domain.

    These are programmer or configuration errors. They are never retried; the
    caller has to fix the offending value. Runtime conditions such as an
    undetermined last response are reported as a ``StopResult`` instead.
    """

    pass
