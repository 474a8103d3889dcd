from itertools import permutations
from typing import Any, List, Optional, Sequence, Tuple


def assignment_to_X(row_to_col: Sequence[int]) -> List[List[int]]:
    n = len(row_to_col)
    X = [[0] * n for _ in range(n)]
    for i, j in enumerate(row_to_col):
        X[i][j] = 1
    return X


def is_permutation_matrix(X: Any) -> bool:
    """True if X is square with exactly one nonzero per row and per column."""
    rows = [[1 if x else 0 for x in row] for row in X]
    n = len(rows)
    if any(len(row) != n for row in rows):
        return False
    if any(sum(row) != 1 for row in rows):
        return False
    return all(sum(rows[i][j] for i in range(n)) == 1 for j in range(n))


def X_to_row_to_col(X: Any) -> List[int]:
    """Convert an assignment matrix (0/1 or bool) to row->col (0-based)."""
    if not is_permutation_matrix(X):
        raise ValueError("X is not a permutation matrix (one selected cell per row and column).")
    row_to_col = []
    for row in X:
        for j, x in enumerate(row):
            if x:
                row_to_col.append(j)
                break
    return row_to_col


def compute_total_cost(C: Any, row_to_col: Sequence[int]) -> float:
    return sum(C[i][j] for i, j in enumerate(row_to_col))


def profit_to_cost(profit: Any, ceiling: Optional[float] = None) -> List[List[float]]:
    """
    Turn a maximisation matrix into a minimisation one: cost = ceiling - profit.
    Default ceiling is max(profit) + 1, so every cost is positive.
    """
    rows = [list(row) for row in profit]
    if not rows:
        return []
    if ceiling is None:
        ceiling = max(max(row) for row in rows if len(row)) + 1
    return [[ceiling - p for p in row] for row in rows]


def brute_force_min(C: Any) -> Tuple[List[int], float]:
    """
    Exhaustive minimum over all n! assignments (first minimum in
    lexicographic permutation order). Only for small n cross-checks.
    """
    n = len(C)
    if any(len(row) != n for row in C):
        raise ValueError("C must be square (n x n).")

    best: List[int] = []
    best_cost = 0.0
    for perm in permutations(range(n)):
        cost = compute_total_cost(C, perm)
        if not best or cost < best_cost:
            best = list(perm)
            best_cost = cost
    return best, best_cost


def print_matrix(mat: Any, title: str) -> None:
    print(title)
    for row in mat:
        print("  " + " ".join(f"{x:>6g}" for x in row))
    print()


if __name__ == "__main__":
    C = [
        [2, 3, 1, 1],
        [5, 8, 3, 2],
        [4, 9, 5, 1],
        [8, 7, 8, 4],
    ]

    row_to_col, min_cost = brute_force_min(C)
    print_matrix(C, "Cost matrix C:")
    print_matrix(assignment_to_X(row_to_col), "Brute-force assignment X:")
    print("Assignment (row -> col, 0-based):", row_to_col)
    print("Minimum total cost:", min_cost)
