"""A participant's identity and its view of others' reputations."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from trust_score.tsg import TsgFramework
from trust_score.tsg_message import MessageAndPubkey
from trust_score.verdict import Verdict

C = TypeVar("C")
I = TypeVar("I")  # noqa: E741

# (sum of reliability estimates, number of estimates)
ReputationComponents = tuple[float, int]
ReputationMap = dict[str, ReputationComponents]


def _format_score(score: float) -> str:
    if math.isfinite(score) and score.is_integer():
        return str(int(score))
    return repr(score)


@dataclass
class Identity(Generic[C, I]):
    """A participant with a channel client and a map of perceived reputations.

    A reputation is the mean of all reliability estimates received for a
    public key; a key with no estimates has the default reputation.
    """

    channel_client: C
    id_info: I
    user_reputation_threshold: float
    user_default_reputation: float
    reputation_map: ReputationMap = field(default_factory=dict)

    def update_reputation(self, new_estimates: Verdict) -> None:
        """Fold every estimate of a verdict into the reputation map."""
        for estimate in new_estimates.verdicts:
            total, count = self.reputation_map.get(estimate.did_public_key, (0.0, 0))
            self.reputation_map[estimate.did_public_key] = (
                total + estimate.estimated_reliability,
                count + 1,
            )

    def check_avg_participants(self, participants: Iterable[str]) -> bool:
        """Whether the participants' average reputation reaches the threshold."""
        participants = list(participants)
        for participant in participants:
            self.add_if_not_already(participant)
        if not participants:
            return False
        total = sum(self.calculate_score(self.reputation_map[p]) for p in participants)
        return total / len(participants) >= self.user_reputation_threshold

    def check_all_participants(self, participants: Iterable[str]) -> bool:
        """Whether every participant reaches the threshold, stopping at the first failure."""
        return all(self.check_participant(p) for p in participants)

    def check_participant(self, participant: str) -> bool:
        """Whether one participant's reputation reaches the threshold."""
        self.add_if_not_already(participant)
        score = self.calculate_score(self.reputation_map[participant])
        return score >= self.user_reputation_threshold

    def add_if_not_already(self, participant: str) -> None:
        """Give an unknown participant an entry with no estimates."""
        self.reputation_map.setdefault(participant, (0.0, 0))

    def calculate_score(self, components: ReputationComponents) -> float:
        """The mean estimate, or the default reputation when there are none."""
        total, count = components
        if count == 0:
            return self.user_default_reputation
        return total / count

    def get_reputation_scores_string(self) -> str:
        """One "key: score" line per known participant."""
        return "".join(
            f"{participant}: {_format_score(self.calculate_score(components))}\n"
            for participant, components in self.reputation_map.items()
        )

    def run_tsg_and_include_in_rm(
        self, messages: Iterable[MessageAndPubkey], tsg_algo: TsgFramework
    ) -> None:
        """Run a trust score generator and record its verdicts."""
        tn_verdicts, wn_verdicts = tsg_algo.tsg_algorithm(list(messages))
        self.update_reputation(tn_verdicts)
        self.update_reputation(wn_verdicts)