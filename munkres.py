"""
Munkres (Hungarian) assignment for square cost matrices.

Classic step-based variant: row reduction, starring, covering, priming and
augmenting paths over the zeros of a reduced cost matrix. O(N^4) because the
prime search rescans the whole matrix after every prime placement.

NaN or infinite entries are not supported; sanitize input before calling.
"""
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np


class InvalidShape(ValueError):
    """Raised when the cost matrix is not a square 2D matrix."""


class Mark(IntEnum):
    NONE = 0
    STAR = 1
    PRIME = 2


class Phase(IntEnum):
    ROW_REDUCE = 1
    INITIAL_STAR = 2
    COVER_STARRED = 3
    FIND_PRIME = 4
    AUGMENT_PATH = 5
    ADJUST_MATRIX = 6
    DONE = 7


def validate_square(cost: Any) -> np.ndarray:
    """Return a float64 copy of cost, or raise InvalidShape if it is not n x n."""
    if isinstance(cost, np.ndarray):
        if cost.ndim == 1 and cost.size == 0:
            return np.zeros((0, 0), dtype=float)
        if cost.ndim != 2 or cost.shape[0] != cost.shape[1]:
            raise InvalidShape(f"Cost matrix must be square (n x n); got shape {cost.shape}.")
        return np.array(cost, dtype=float)

    try:
        rows = list(cost)
    except TypeError:
        raise InvalidShape(f"Cost matrix must be 2D; got {type(cost).__name__}.") from None
    n = len(rows)
    if n == 0:
        return np.zeros((0, 0), dtype=float)
    try:
        lengths = [len(row) for row in rows]
    except TypeError:
        raise InvalidShape("Cost matrix must be 2D (a sequence of rows).") from None
    if any(k != n for k in lengths):
        raise InvalidShape(f"Cost matrix must be square (n x n); got {n} rows of lengths {lengths}.")
    try:
        C = np.array(rows, dtype=float)
    except (TypeError, ValueError):
        raise InvalidShape("Cost matrix rows must hold real numbers only.") from None
    if C.shape != (n, n):
        raise InvalidShape(f"Cost matrix must be square (n x n); got shape {C.shape}.")
    return C


class MunkresSolver:
    """
    Working state for one solve: reduced cost copy, mark matrix, covers and
    the augmenting path buffer. Not reusable across inputs. A float64 cost
    array is reduced in place; solve() hands it a private copy.
    """

    def __init__(self, cost: np.ndarray, log: Optional[Callable[[str], None]] = None):
        self.C = np.asarray(cost, dtype=float)
        self.n = self.C.shape[0]
        n = self.n
        self.marks = np.full((n, n), Mark.NONE, dtype=np.int8)
        self.row_covered = np.zeros(n, dtype=bool)
        self.col_covered = np.zeros(n, dtype=bool)
        self.path: List[Tuple[int, int]] = []
        self.seed: Tuple[int, int] = (-1, -1)
        self._log = log if log is not None else (lambda msg: None)

        self.stats: Dict[str, Any] = {
            "N": n,
            "phase_visits": {p.name: 0 for p in Phase},
            "augmentations": 0,
            "adjustments": 0,
            "adjust_delta_sum": 0.0,
            "primes": 0,
            "path_lengths": [],
        }

    def run(self) -> np.ndarray:
        """Drive the phases until DONE; return the boolean assignment matrix."""
        phases = {
            Phase.ROW_REDUCE: self.row_reduce,
            Phase.INITIAL_STAR: self.initial_star,
            Phase.COVER_STARRED: self.cover_starred_columns,
            Phase.FIND_PRIME: self.find_prime,
            Phase.AUGMENT_PATH: self.augment_path,
            Phase.ADJUST_MATRIX: self.adjust_matrix,
        }
        phase = Phase.ROW_REDUCE
        while phase != Phase.DONE:
            self.stats["phase_visits"][phase.name] += 1
            phase = phases[phase]()
        self.stats["phase_visits"][Phase.DONE.name] += 1
        return self.marks == Mark.STAR

    # ---- phases ----

    def row_reduce(self) -> Phase:
        if self.n:
            self.C -= self.C.min(axis=1)[:, np.newaxis]
        self._log("phase 1: subtracted row minima")
        return Phase.INITIAL_STAR

    def initial_star(self) -> Phase:
        n = self.n
        for i in range(n):
            for j in range(n):
                if self.C[i, j] == 0 and not self.row_covered[i] and not self.col_covered[j]:
                    self._star(i, j)
                    self.row_covered[i] = True
                    self.col_covered[j] = True
                    break
        self.clear_covers()
        self._log(f"phase 2: starred {int((self.marks == Mark.STAR).sum())} zeros")
        return Phase.COVER_STARRED

    def cover_starred_columns(self) -> Phase:
        self.col_covered[:] = np.any(self.marks == Mark.STAR, axis=0)
        covered = int(self.col_covered.sum())
        self._log(f"phase 3: {covered}/{self.n} columns covered")
        if covered >= self.n:
            return Phase.DONE
        return Phase.FIND_PRIME

    def find_prime(self) -> Phase:
        while True:
            row, col = self.find_uncovered_zero()
            if row < 0:
                self._log("phase 4: no uncovered zero")
                return Phase.ADJUST_MATRIX

            self.marks[row, col] = Mark.PRIME
            self.stats["primes"] += 1

            star_col = self.find_star_in_row(row)
            if star_col >= 0:
                self.row_covered[row] = True
                self.col_covered[star_col] = False
                self._log(f"phase 4: primed ({row},{col}); cover row {row}, uncover col {star_col}")
            else:
                self.seed = (row, col)
                self._log(f"phase 4: primed ({row},{col}); no star in row, augmenting")
                return Phase.AUGMENT_PATH

    def augment_path(self) -> Phase:
        self.path = [self.seed]
        while True:
            col = self.path[-1][1]
            row = self.find_star_in_col(col)
            if row < 0:
                break
            self.path.append((row, col))
            prime_col = self.find_prime_in_row(row)
            if prime_col < 0:
                raise RuntimeError(f"Starred row {row} on the alternating path has no primed zero.")
            self.path.append((row, prime_col))

        self.flip_path()
        self.clear_covers()
        self.erase_primes()

        self.stats["augmentations"] += 1
        self.stats["path_lengths"].append(len(self.path))
        self._log(f"phase 5: augmented along {self.path}")
        return Phase.COVER_STARRED

    def adjust_matrix(self) -> Phase:
        h = self.smallest_uncovered()
        self.C[self.row_covered, :] += h
        self.C[:, ~self.col_covered] -= h

        self.stats["adjustments"] += 1
        self.stats["adjust_delta_sum"] += h
        self._log(f"phase 6: adjusted by {h:g}")
        return Phase.FIND_PRIME

    # ---- queries and mutations ----

    def find_uncovered_zero(self) -> Tuple[int, int]:
        """First zero in row-major order whose row and column are uncovered, else (-1, -1)."""
        n = self.n
        for i in range(n):
            if self.row_covered[i]:
                continue
            for j in range(n):
                if self.C[i, j] == 0 and not self.col_covered[j]:
                    return i, j
        return -1, -1

    def find_star_in_row(self, row: int) -> int:
        hits = np.flatnonzero(self.marks[row] == Mark.STAR)
        return int(hits[0]) if hits.size else -1

    def find_star_in_col(self, col: int) -> int:
        hits = np.flatnonzero(self.marks[:, col] == Mark.STAR)
        return int(hits[0]) if hits.size else -1

    def find_prime_in_row(self, row: int) -> int:
        hits = np.flatnonzero(self.marks[row] == Mark.PRIME)
        return int(hits[0]) if hits.size else -1

    def smallest_uncovered(self) -> float:
        return float(self.C[np.ix_(~self.row_covered, ~self.col_covered)].min())

    def flip_path(self) -> None:
        # Unstar first so that starring never sees two stars in a line.
        for r, c in self.path[1::2]:
            self.marks[r, c] = Mark.NONE
        for r, c in self.path[0::2]:
            self._star(r, c)

    def clear_covers(self) -> None:
        self.row_covered[:] = False
        self.col_covered[:] = False

    def erase_primes(self) -> None:
        self.marks[self.marks == Mark.PRIME] = Mark.NONE

    def _star(self, row: int, col: int) -> None:
        if self.find_star_in_row(row) >= 0 or self.find_star_in_col(col) >= 0:
            raise RuntimeError(f"Cell ({row},{col}) would be a second star in its row or column.")
        self.marks[row, col] = Mark.STAR


def solve(cost: Any) -> np.ndarray:
    """
    Minimum-cost assignment on an n x n cost matrix.

    Args:
        cost: n x n real matrix (nested lists or numpy array). Not mutated.
              To maximise, transform values first (e.g. assignment_utils.profit_to_cost).

    Returns:
        (n, n) boolean array with exactly one True per row and per column.
        An empty (0, 0) array for empty input.

    Raises:
        InvalidShape: the matrix is not square. Nothing is computed in that case.

    NaN/Inf entries are unsupported and give undefined results.
    """
    C = validate_square(cost)
    return MunkresSolver(C).run()


def solve_verbose(
    cost: Any,
    verbose: bool = True,
    max_print_steps: Optional[int] = 2000,
) -> Tuple[np.ndarray, float, Dict[str, Any]]:
    """
    Same as solve(), with an optional phase trace and run statistics.

    Returns:
      X (boolean assignment matrix),
      total_cost over the original matrix,
      stats dict (phase_visits, augmentations, adjustments, primes, ...).
    """
    C = validate_square(cost)

    printed = 0
    def log(msg: str):
        nonlocal printed
        if not verbose:
            return
        if max_print_steps is not None and printed >= max_print_steps:
            return
        print(msg)
        printed += 1

    log(f"=== Munkres (N={C.shape[0]}) ===")
    solver = MunkresSolver(C, log=log)
    X = solver.run()

    total_cost = float(C[X].sum())
    stats = solver.stats
    stats["total_cost"] = total_cost
    stats["assignment"] = [(int(i), int(j)) for i, j in zip(*np.nonzero(X))]

    log("=== Done ===")
    log(f"assignment: {stats['assignment']}")
    log(f"total_cost: {total_cost:g}")
    log(f"augmentations: {stats['augmentations']}, adjustments: {stats['adjustments']}")

    return X, total_cost, stats


if __name__ == "__main__":
    from assignment_utils import X_to_row_to_col, print_matrix, profit_to_cost

    C = [
        [2, 3, 1, 1],
        [5, 8, 3, 2],
        [4, 9, 5, 1],
        [8, 7, 8, 4],
    ]

    X, total_cost, stats = solve_verbose(C, verbose=True)

    print()
    print_matrix(C, "Cost matrix C:")
    print_matrix(X.astype(int).tolist(), "Solution (assignment) matrix X (1 means selected):")
    print("Assignment (row -> col, 0-based):", X_to_row_to_col(X))
    print("Minimum total cost:", total_cost)
    print("Phase visits:", stats["phase_visits"])

    # Maximal revenue: revenue[i][j] = (i+1)*(j+1), solved as 100 - revenue.
    revenue = [[i * j for j in range(1, 5)] for i in range(1, 5)]
    X = solve(profit_to_cost(revenue, ceiling=100))
    row_to_col = X_to_row_to_col(X)
    print("\nRevenue assignment:", row_to_col)
    print("Maximal revenue:", sum(revenue[i][j] for i, j in enumerate(row_to_col)))
