"""Best XI selection built on composite scores."""

from .service import (
    BestXIOutput,
    SelectionResult,
    build_best_xi,
    candidate_sort_key,
    select_xi,
    selection_counts,
)

__all__ = [
    "BestXIOutput",
    "SelectionResult",
    "build_best_xi",
    "candidate_sort_key",
    "select_xi",
    "selection_counts",
]
