"""Gauss-Jordan row reduction shared by inversion and determinant.

The routines work in place on square float64 numpy arrays. Pivoting is
positional by default: row ``m`` is always the pivot for column ``m`` and a
pivot whose magnitude is below ``epsilon`` ends the reduction. Failure is
reported in the returned ``EliminationResult`` rather than raised, so each
caller decides how to surface it.
"""

import logging
from dataclasses import dataclass

import numpy as np

from densela.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

PIVOTING_MODES = ("none", "partial")


@dataclass(frozen=True)
class EliminationResult:
    """Outcome of ``eliminate``.

    Attributes:
        singular_row: Diagonal position of the pivot that fell below
            ``epsilon``, or None if every pivot passed
        pivot: Value of that pivot
        swaps: Number of row exchanges performed (partial pivoting only)
    """

    singular_row: int | None = None
    pivot: float | None = None
    swaps: int = 0

    @property
    def ok(self) -> bool:
        return self.singular_row is None


def check_pivoting(pivoting: str) -> str:
    if pivoting not in PIVOTING_MODES:
        raise InvalidArgumentError(
            f"pivoting: expected one of {PIVOTING_MODES}, got {pivoting!r}"
        )
    return pivoting


def _swap_rows(a: np.ndarray, i: int, j: int) -> None:
    a[[i, j]] = a[[j, i]]


def eliminate(
    data: np.ndarray,
    accumulator: np.ndarray | None = None,
    *,
    epsilon: float,
    stop: int | None = None,
    pivoting: str = "none",
) -> EliminationResult:
    """Clear the off-diagonal entries of ``data`` column by column.

    For each pivot row ``m`` below ``stop`` (default: every row), every
    other row ``n`` has ``data[n, m] / data[m, m]`` times row ``m``
    subtracted from it. ``accumulator``, when given, undergoes the same row
    operations, so starting from the identity it collects the inverse
    transform.

    Parameters
    ----------
    data : numpy.ndarray
        Square float64 matrix, modified in place.
    accumulator : numpy.ndarray | None, optional
        Matrix of the same shape that follows every row operation.
    epsilon : float
        Absolute threshold below which a pivot counts as zero.
    stop : int | None, optional
        Number of pivot rows to process.
    pivoting : {"none", "partial"}, optional
        ``"partial"`` first swaps the row with the largest magnitude in
        column ``m`` (at or below ``m``) into the pivot position.

    Returns
    -------
    EliminationResult
        ``ok`` is False if a pivot fell below ``epsilon``; ``data`` and
        ``accumulator`` are then partially reduced.
    """
    check_pivoting(pivoting)
    n_rows = data.shape[0]
    stop = n_rows if stop is None else stop
    swaps = 0

    for m in range(stop):
        if pivoting == "partial":
            best = m + int(np.argmax(np.abs(data[m:, m])))
            if best != m:
                logger.debug("partial pivoting: swap rows %d and %d", m, best)
                _swap_rows(data, m, best)
                if accumulator is not None:
                    _swap_rows(accumulator, m, best)
                swaps += 1

        pivot = data[m, m]
        if abs(pivot) < epsilon:
            logger.debug(
                "singular pivot at row %d: |%g| < %g", m, float(pivot), epsilon
            )
            return EliminationResult(singular_row=m, pivot=float(pivot), swaps=swaps)

        for n in range(n_rows):
            if n == m:
                continue
            c = data[n, m] / pivot
            data[n] -= c * data[m]
            if accumulator is not None:
                accumulator[n] -= c * accumulator[m]

    return EliminationResult(swaps=swaps)


def normalize_rows(data: np.ndarray, accumulator: np.ndarray) -> None:
    """Divide each row of both matrices by the diagonal element of ``data``."""
    diagonal = np.diagonal(data).copy()[:, np.newaxis]
    data /= diagonal
    accumulator /= diagonal
