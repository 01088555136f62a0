"""Regularized Gaussian elimination for the small normal-equation systems of polynomial fits."""

from regression.numeric import clamp, ensure_finite

RIDGE = 1e-6  # Tikhonov term added to the diagonal
PIVOT_EPSILON = 1e-10
COEFFICIENT_LIMIT = 1e6


def solve_regularized(matrix: list[list[float]], vector: list[float]) -> list[float]:
    """
    Solve ``(A + λI)·c = b`` by Gaussian elimination with partial pivoting.

    A column whose best pivot is numerically zero is skipped, and its
    coefficient comes out as 0 instead of a division blow-up. Each solved
    coefficient is clamped to ±1e6. The inputs are not modified.

    Raises NumericOverflow if elimination produces a non-finite entry.
    """
    size = len(vector)
    augmented = [
        [matrix[r][c] + (RIDGE if r == c else 0.0) for c in range(size)] + [vector[r]]
        for r in range(size)
    ]

    for col in range(size - 1):
        pivot_row = max(range(col, size), key=lambda r: abs(augmented[r][col]))
        if abs(augmented[pivot_row][col]) < PIVOT_EPSILON:
            continue
        if pivot_row != col:
            augmented[col], augmented[pivot_row] = augmented[pivot_row], augmented[col]

        pivot = augmented[col]
        for row in augmented[col + 1:]:
            factor = row[col] / pivot[col]
            for k in range(col, size + 1):
                row[k] -= factor * pivot[k]
            ensure_finite(*row, what="eliminated row")

    solution = [0.0] * size
    for i in range(size - 1, -1, -1):
        residual = augmented[i][size] - sum(
            augmented[i][j] * solution[j] for j in range(i + 1, size)
        )
        diagonal = augmented[i][i]
        value = 0.0 if abs(diagonal) < PIVOT_EPSILON else residual / diagonal
        ensure_finite(value, what="solved coefficient")
        solution[i] = clamp(value, -COEFFICIENT_LIMIT, COEFFICIENT_LIMIT)

    return solution
