"""Trust score generators for the exchange application."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

from trust_score.messages import (
    ExchangeOutcome,
    InteractionSig,
    WitnessSig,
    find_associated_wnsig,
)
from trust_score.predict import predict_outcome
from trust_score.tsg_message import MessageAndPubkey
from trust_score.verdict import Verdict, generate_tx_verdict


class HonestWho(enum.Enum):
    """Which group of participants is assumed to be honest."""

    WITNESSES = "witnesses"
    TRANSACTING_NODES = "transacting_nodes"


class TsgFramework(ABC):
    """A trust score generator: turns a conversation into verdicts."""

    @abstractmethod
    def tsg_algorithm(self, msgs: Iterable[MessageAndPubkey]) -> tuple[Verdict, Verdict]:
        """Verdicts for the transacting nodes, then for the witnesses."""


def _participant_sigs(
    msgs: list[MessageAndPubkey],
) -> tuple[list[InteractionSig], list[WitnessSig]]:
    if not msgs:
        raise ValueError("no messages to judge")
    sigs = msgs[0].get_sigs_of_participants()
    if sigs is None:
        raise ValueError("first message must be an InteractionMsg")
    return sigs


def tsg_know_outcome(
    msgs: Iterable[MessageAndPubkey],
    known_outcome: ExchangeOutcome,
) -> tuple[Verdict, Verdict] | None:
    """Judge everyone against an outcome that is known to be true.

    Witnesses agreeing with the known outcome are honest, the others are not;
    each transacting node is honest exactly where the known outcome is true.
    Returns None when a witness statement is not an exchange outcome.
    """
    msgs = list(msgs)
    known = list(known_outcome)
    tn_sigs, wn_sigs = _participant_sigs(msgs)

    wn_outcomes: list[float] = []
    for msg in msgs:
        if not msg.is_witness_statement_msg():
            continue
        statement = msg.get_witness_statement()
        if not isinstance(statement, list):
            return None
        wn_outcomes.append(1.0 if statement == known else 0.0)

    tn_outcomes = [1.0 if honest else 0.0 for honest in known]

    return generate_tx_verdict(tn_sigs, tn_outcomes), generate_tx_verdict(wn_sigs, wn_outcomes)


def tsg_organization(
    msgs: Iterable[MessageAndPubkey],
    org_pubkey: str,
    default_reputation: float,
) -> tuple[Verdict, Verdict] | None:
    """Trust witnesses of one organization fully and others by a default reputation.

    The outcome is predicted from the weighted witness statements and everyone
    is then judged against that prediction. Returns None when a witness
    statement is not an exchange outcome.
    """
    msgs = list(msgs)
    _, wn_sigs = _participant_sigs(msgs)

    statements = []
    reliabilities: list[float] = []
    for msg in msgs:
        if not msg.is_witness_statement_msg():
            continue
        statements.append(msg.get_witness_statement())
        sig = find_associated_wnsig(wn_sigs, msg.sender_did)
        if sig is None:
            raise ValueError(f"no witness signature for sender {msg.sender_did!r}")
        reliabilities.append(1.0 if sig.org_cert.org_pubkey == org_pubkey else default_reputation)

    if any(not isinstance(statement, list) for statement in statements):
        return None

    predicted = predict_outcome(statements, reliabilities)
    return tsg_know_outcome(msgs, predicted)


def _required(result: tuple[Verdict, Verdict] | None) -> tuple[Verdict, Verdict]:
    if result is None:
        raise ValueError("witness statements are not exchange outcomes")
    return result


@dataclass
class TsgKnowOutcome(TsgFramework):
    """Judges a conversation against a known outcome."""

    known_outcome: ExchangeOutcome

    def tsg_algorithm(self, msgs: Iterable[MessageAndPubkey]) -> tuple[Verdict, Verdict]:
        return _required(tsg_know_outcome(msgs, list(self.known_outcome)))


@dataclass
class TsgOrganization(TsgFramework):
    """Judges a conversation trusting one organization's witnesses most."""

    org_pubkey: str
    default_reputation: float

    def tsg_algorithm(self, msgs: Iterable[MessageAndPubkey]) -> tuple[Verdict, Verdict]:
        return _required(tsg_organization(msgs, self.org_pubkey, self.default_reputation))