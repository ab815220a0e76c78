
import operator
from typing import Optional, Sequence

from slate_explore.errors import ValidationError


def _as_index(value, what: str) -> int:
    # bool is an int subclass but never a valid index; numpy integers pass
    if isinstance(value, bool):
        raise ValidationError(f"{what} is not an integer index: {value!r}")
    try:
        return operator.index(value)
    except TypeError:
        raise ValidationError(f"{what} is not an integer index: {value!r}") from None


def validate_ranking(ranking: Sequence[int], expected_count: int) -> None:
    """
    Checks that ranking is a permutation of 0..expected_count-1.

    Any integral index type is accepted (e.g. numpy.int64 from argsort).
    Raises ValidationError on a length mismatch, a non-integer entry, an index
    outside [0, expected_count) or a repeated index.
    """
    if ranking is None:
        raise ValidationError("ranking is missing")

    if len(ranking) != expected_count:
        raise ValidationError(
            f"ranking has {len(ranking)} actions, expected {expected_count}"
        )

    seen = set()
    for position, value in enumerate(ranking):
        action = _as_index(value, f"action at position {position}")
        if action < 0 or action >= expected_count:
            raise ValidationError(
                f"action {action} at position {position} is outside [0, {expected_count})"
            )
        if action in seen:
            raise ValidationError(f"action {action} appears more than once")
        seen.add(action)


def validate_action_count(expected_count: int, max_actions: Optional[int] = None) -> None:
    expected_count = _as_index(expected_count, "expected_count")
    if expected_count < 0:
        raise ValidationError(f"expected_count must not be negative, got {expected_count}")
    if max_actions is not None and expected_count > max_actions:
        raise ValidationError(
            f"expected_count {expected_count} exceeds max_actions {max_actions}"
        )
