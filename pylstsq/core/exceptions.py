"""
Exception and warning hierarchy for pylstsq.

All exceptions inherit from LstsqError to allow catching any
library-specific error. Non-fatal conditioning diagnostics are warning
categories (RuntimeWarning subclasses) so callers can filter them with
the standard warnings machinery.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class LstsqError(Exception):
    """Base exception for all pylstsq errors."""
    pass


class ValidationError(LstsqError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when A and b shapes don't match, when a matrix that must be
    square is not, or when the system is under-determined (m < n).
    """
    pass


class NumericalError(LstsqError):
    """
    Numerical computation failed.

    Base class for structural failures of a factorization strategy.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a strategy requires invertibility but the matrix
    is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (the number of columns)
        index: Pivot / column index where the failure was detected
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
        index: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank
        self.index = index


class SingularTriangularMatrixError(SingularMatrixError):
    """
    Triangular matrix has a (numerically) zero diagonal entry.

    Raised by forward/back substitution. ``index`` is the row whose
    diagonal entry could not be divided by.

    Attributes:
        diagonal_value: The offending diagonal entry
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        index: int | None = None,
        diagonal_value: float | None = None,
    ):
        super().__init__(message, matrix_name=matrix_name, index=index)
        self.diagonal_value = diagonal_value


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised when Cholesky factorization meets a non-positive radicand.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        index: Column at which the factorization broke down
        radicand: The non-positive value under the square root
        rank: Numerical rank of the underlying design, if known
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        index: int | None = None,
        radicand: float | None = None,
        rank: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.index = index
        self.radicand = radicand
        self.rank = rank


class ConvergenceError(LstsqError):
    """
    Iterative algorithm failed to converge.

    Raised when the Jacobi SVD does not orthogonalize all column pairs
    within the maximum number of sweeps.

    Attributes:
        iterations: Number of sweeps completed
        final_change: Largest remaining off-diagonal ratio
        reason: Why convergence failed (e.g., 'max_iterations')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class IllConditionedWarning(RuntimeWarning):
    """Condition number exceeds the configured threshold; solution still returned."""


class RankDeficientWarning(RuntimeWarning):
    """Design matrix is rank-deficient; the minimum-norm solution was computed."""


class StrategyFallbackWarning(RuntimeWarning):
    """The requested strategy failed structurally and another one was used."""
