"""Predicting an exchange outcome from weighted witness statements."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


def predict_outcome(
    witness_statements: Iterable[Sequence[bool]],
    reputations: Iterable[float],
) -> list[bool]:
    """Weigh each witness statement by its witness's reputation and take the sign.

    Every statement votes +reputation for a true entry and -reputation for a
    false one; an entry is predicted true only when its total is above zero.
    All statements must be at least as long as the first one.
    """
    statements = [list(statement) for statement in witness_statements]
    weights = list(reputations)
    if not statements:
        raise ValueError("at least one witness statement is needed")
    if len(weights) < len(statements):
        raise ValueError(
            f"{len(statements)} witness statements but only {len(weights)} reputations"
        )

    width = len(statements[0])
    totals = [0.0] * width
    for statement, weight in zip(statements, weights):
        if len(statement) < width:
            raise ValueError(
                f"witness statement has {len(statement)} outcomes, expected {width}"
            )
        for position, outcome in enumerate(statement[:width]):
            totals[position] += weight if outcome else -weight

    return [total > 0.0 for total in totals]