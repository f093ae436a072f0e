"""Parsing a conversation of JSON messages into messages with known senders."""

from __future__ import annotations

from trust_score.messages import InteractionMsg, Sig, is_tx_msg, message_from_json
from trust_score.tsg_message import MessageAndPubkey


class ParseError(ValueError):
    """Raised when a conversation does not have the expected structure."""


def find_did_pk_from_channel_pk(participants, channel_pk: str) -> str | None:
    """The DID public key of the participant signing with channel_pk, or None."""
    return next(
        (p.did_pubkey() for p in participants if p.channel_pubkey() == channel_pk), None
    )


def get_sigs(tx) -> list[Sig] | None:
    """Witness signatures followed by transacting signatures of an interaction message."""
    if not isinstance(tx, InteractionMsg):
        return None
    return [*tx.witness_sigs, *tx.interaction_sigs]


def _sender(sigs, channel_pk: str) -> str:
    did = find_did_pk_from_channel_pk(sigs, channel_pk)
    if did is None:
        raise ParseError(f"no participant signs with channel key {channel_pk!r}")
    return did


def parse_to_message(message_and_pubkey, sigs=None):
    """Decode one (json, channel key) pair.

    Without sigs the message must be the interaction message; its signatures
    are returned alongside. With sigs, the second element is None.
    """
    text, channel_pk = message_and_pubkey
    message = message_from_json(text)
    if sigs is None:
        if not is_tx_msg(message):
            raise ParseError("first message must be an InteractionMsg")
        extracted = get_sigs(message)
        return MessageAndPubkey(message, _sender(extracted, channel_pk)), extracted
    return MessageAndPubkey(message, _sender(sigs, channel_pk)), None


def parse_messages(message_and_pubkey) -> list[MessageAndPubkey]:
    """Decode a conversation whose first message is the interaction message."""
    pairs = iter(message_and_pubkey)
    try:
        first = next(pairs)
    except StopIteration:
        raise ParseError("no messages to parse") from None
    head, sigs = parse_to_message(first, None)
    return [head, *(parse_to_message(pair, sigs)[0] for pair in pairs)]