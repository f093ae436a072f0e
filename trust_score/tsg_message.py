"""A decoded message together with the DID of its sender."""

from __future__ import annotations

import copy
from dataclasses import dataclass

from trust_score.messages import (
    InteractionMsg,
    InteractionSig,
    Message,
    Outcome,
    WitnessSig,
    WitnessStatement,
    is_tx_msg,
)


@dataclass
class MessageAndPubkey:
    """A message and the DID public key of whoever sent it."""

    message: Message
    sender_did: str

    def is_tx_msg(self) -> bool:
        return is_tx_msg(self.message)

    def is_witness_statement_msg(self) -> bool:
        return isinstance(self.message, WitnessStatement)

    def get_witness_statement(self) -> Outcome | None:
        """A copy of the witness statement's outcome, or None for other messages."""
        if not self.is_witness_statement_msg():
            return None
        return copy.deepcopy(self.message.outcome)

    def get_sigs_of_participants(
        self,
    ) -> tuple[list[InteractionSig], list[WitnessSig]] | None:
        """The transacting nodes' and witnesses' signatures of an interaction message."""
        if not isinstance(self.message, InteractionMsg):
            return None
        return list(self.message.interaction_sigs), list(self.message.witness_sigs)