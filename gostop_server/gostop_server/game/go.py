"""Go declaration rules and the end-of-round Go multiplier."""

DEFAULT_GO_THRESHOLD = 3


def can_declare_go(base_score: int, threshold: int = DEFAULT_GO_THRESHOLD) -> bool:
    """Check if a base score is high enough to declare Go (or Stop)."""
    return base_score >= threshold


def final_score(base: int, go_count: int) -> int:
    """Apply the Go bonus to a base score.

    1 and 2 Go add one point each; from the third Go on, the bonus points are
    added and the result doubles for every Go beyond the second.

    Args:
        base: Base score from the captured pile
        go_count: Number of Go declarations

    Returns:
        Final score
    """
    if go_count <= 0:
        return base
    if go_count <= 2:
        return base + go_count
    extra = go_count - 2
    return (base + extra) * 2**extra
