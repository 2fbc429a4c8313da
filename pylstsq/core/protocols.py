"""
Core protocols for pylstsq.

We use Protocol (structural typing) rather than ABC (nominal typing) so
any object with the right shape can act as a strategy backend.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Two-phase solve: decompose once, then reduce to triangular systems
    - Type-safe: use generics to preserve type information
"""

from typing import Protocol, TypeVar, runtime_checkable

D = TypeVar('D', contravariant=True)  # Design type
F = TypeVar('F')  # Factorization type


@runtime_checkable
class Backend(Protocol[D, F]):
    """
    Protocol for least-squares strategy backends.

    A backend factors the problem (``decompose``) and then reduces it to
    triangular or diagonal solves (``solve``). Splitting the two phases
    lets the driver track the ``unsolved → decomposed → solved`` states
    and attribute failures to the phase in which they occurred.

    Backends are stateless: all configuration arrives at construction
    time or through the design.

    Type Parameters:
        D: The design type this backend accepts
        F: The factorization type produced by ``decompose``
    """

    @property
    def name(self) -> str:
        """
        Backend identifier, equal to the strategy name.

        Examples: 'normal', 'cholesky', 'lu', 'qr', 'svd'
        """
        ...

    def decompose(self, design: D) -> F:
        """
        Factor the matrix this strategy works on.

        Raises:
            NumericalError: If the matrix violates the strategy's preconditions
        """
        ...

    def solve(self, design: D, factorization: F):
        """
        Compute the solution vector from a factorization.

        Raises:
            SingularTriangularMatrixError: If a triangular solve hits a zero pivot
        """
        ...
