"""Verdicts on participants' reliability."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ParticipantVerdict:
    """An estimate of one participant's reliability."""

    did_public_key: str
    estimated_reliability: float


@dataclass
class Verdict:
    """A set of participant verdicts."""

    verdicts: list[ParticipantVerdict] = field(default_factory=list)


def generate_tx_verdict(sigs, verdicts) -> Verdict:
    """Pair each signer's DID public key with the reliability at the same position."""
    sigs = list(sigs)
    verdicts = list(verdicts)
    if len(verdicts) < len(sigs):
        raise ValueError(f"{len(sigs)} signatures but only {len(verdicts)} verdicts")
    return Verdict(
        [ParticipantVerdict(sig.did_pubkey(), value) for sig, value in zip(sigs, verdicts)]
    )