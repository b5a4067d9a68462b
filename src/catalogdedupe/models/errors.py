"""Exception types shared across the engine."""


class InvariantViolationError(RuntimeError):
    """Raised when the engine detects an internal programming fault.

    Distinct from data-quality warnings: a run that raises this error is
    aborted and produces no report.
    """

    def __init__(self, message: str, *, pair: tuple[str, str] | None = None) -> None:
        """Initialize invariant violation.

        Parameters
        ----------
        message : str
            Error message.
        pair : tuple[str, str] | None, optional
            Offending item pair, if any.
        """
        super().__init__(message)
        self.pair = pair
