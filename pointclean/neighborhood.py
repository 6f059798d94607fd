import numpy as np


def average_squared_distance(query: np.ndarray, neighbor_query, k: int, neighbor_radius: float = 0.0) -> float:
    """Average squared distance from query to its neighbor set.

    Divides by the number of neighbors actually returned, which can be lower
    than k in radius mode. An empty neighbor set raises ZeroDivisionError.
    """
    query = np.asarray(query, dtype=np.float64)
    neighbors = np.asarray(neighbor_query.neighbors(query, k, neighbor_radius), dtype=np.float64)
    diffs = neighbors.reshape(-1, 3) - query
    sq_distance = float(np.einsum("ij,ij->", diffs, diffs))
    return sq_distance / len(diffs)
