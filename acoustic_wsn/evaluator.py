# acoustic_wsn/evaluator.py
import numpy as np
from numba import njit

# columns of the metrics matrix returned by evaluate_routes_batch
COL_DIST, COL_NEAR, COL_FAR, COL_DIST_CLOSED = range(4)


@njit(cache=True)
def greedy_tour_length(rows, dist_matrix, farthest):
    """
    Open tour from the depot (row 0) that always steps to the farthest (or
    nearest) unvisited row. Ties keep the first row in ``rows`` order.
    Returns the length and the last row visited.
    """
    n = rows.shape[0]
    visited = np.zeros(n, dtype=np.bool_)
    cur = 0
    total = 0.0
    for _ in range(n):
        best = -1
        best_d = 0.0
        for k in range(n):
            if visited[k]:
                continue
            d = dist_matrix[cur, rows[k]]
            if best == -1:
                best = k
                best_d = d
            elif farthest and d > best_d:
                best = k
                best_d = d
            elif not farthest and d < best_d:
                best = k
                best_d = d
        visited[best] = True
        total += best_d
        cur = rows[best]
    return total, cur


@njit(cache=True)
def route_length(rows, dist_matrix):
    cur = 0
    total = 0.0
    for i in range(rows.shape[0]):
        nxt = rows[i]
        total += dist_matrix[cur, nxt]
        cur = nxt
    return total, cur


@njit(cache=True)
def evaluate_routes_batch(routes_batch, lengths, dist_matrix):
    """
    Distance figures for a batch of routes.

    ``routes_batch`` is (B, L) of distance-matrix rows padded with -1,
    ``lengths`` the number of valid rows per route. Returns a (B, 4) matrix:
    route length, nearest-neighbour tour and farthest-neighbour tour over the
    same node set, then the route length including the leg back to the depot.
    """
    B = routes_batch.shape[0]
    metrics = np.zeros((B, 4), dtype=np.float64)
    for b in range(B):
        n = lengths[b]
        if n == 0:
            continue
        rows = routes_batch[b, :n]
        d, last = route_length(rows, dist_matrix)
        ordered = np.sort(rows)
        d_near, _ = greedy_tour_length(ordered, dist_matrix, False)
        d_far, _ = greedy_tour_length(ordered, dist_matrix, True)
        metrics[b, 0] = d
        metrics[b, 1] = d_near
        metrics[b, 2] = d_far
        metrics[b, 3] = d + dist_matrix[last, 0]
    return metrics
