from .judging import aggregate, compute_weighted_score, ensure_gradable, upsert_score
from .publish import apply_tab_update, validate_publish_requirements

__all__ = [
    "aggregate",
    "compute_weighted_score",
    "ensure_gradable",
    "upsert_score",
    "apply_tab_update",
    "validate_publish_requirements",
]
