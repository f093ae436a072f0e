"""Event protocol messages, signatures and contracts, with their JSON wire form."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Union


class MessageFormatError(ValueError):
    """Raised when a message cannot be decoded from its JSON form."""


PublicKey = str
Ordinate = tuple[int, int, float]
CoordinateDMS = tuple[Ordinate, Ordinate]
ExchangeOutcome = list[bool]


class Sig(ABC):
    """A signature that ties a channel public key to a DID public key."""

    @abstractmethod
    def did_pubkey(self) -> str:
        """The DID public key of the signer."""

    @abstractmethod
    def channel_pubkey(self) -> str:
        """The channel public key of the signer."""


@dataclass
class OrganizationCertificatePreSig:
    """The data an organization signs when certifying a client."""

    client_pubkey: str
    timeout: int


@dataclass
class OrganizationCertificate:
    """A certificate granted by an organization to a client."""

    client_pubkey: str
    timeout: int
    org_pubkey: str
    signature: bytes


@dataclass(frozen=True)
class UserOrWitnesses:
    """A compensation recipient: a user, or the witnesses as a group when user is None."""

    user: str | None = None


@dataclass
class ExchangeContract:
    """Contract of the exchange application."""

    channel_address: str
    offer: str
    participants: list[tuple[PublicKey, str]]
    compensation: list[tuple[UserOrWitnesses, float]]
    time: int
    location: CoordinateDMS
    timeout: int


@dataclass
class MeetingContract:
    """Contract of the meeting application."""

    channel_address: str
    purpose: str
    time: int
    location: CoordinateDMS
    timeout: int


Contract = Union[ExchangeContract, MeetingContract]
Outcome = Union[ExchangeOutcome, MeetingContract]


@dataclass
class InteractionPreSig:
    """The data a transacting participant signs."""

    contract: Contract
    signer_channel_pubkey: str
    witnesses: list[PublicKey]
    wit_node_sigs: list[bytes]
    org_cert: OrganizationCertificate
    timeout: int


@dataclass
class InteractionSig(Sig):
    """A transacting participant's signature over an interaction."""

    contract: Contract
    signer_channel_pubkey: str
    witnesses: list[PublicKey]
    wit_node_sigs: list[bytes]
    org_cert: OrganizationCertificate
    timeout: int
    signer_did_pubkey: str
    signature: bytes

    def did_pubkey(self) -> str:
        return self.signer_did_pubkey

    def channel_pubkey(self) -> str:
        return self.signer_channel_pubkey


@dataclass
class WitnessPreSig:
    """The data a witness signs."""

    contract: Contract
    signer_channel_pubkey: str
    org_cert: OrganizationCertificate
    timeout: int


@dataclass
class WitnessSig(Sig):
    """A witness's signature over a contract."""

    contract: Contract
    signer_channel_pubkey: str
    org_cert: OrganizationCertificate
    timeout: int
    signer_did_pubkey: str
    signature: bytes

    def did_pubkey(self) -> str:
        return self.signer_did_pubkey

    def channel_pubkey(self) -> str:
        return self.signer_channel_pubkey


@dataclass
class CompensationMsg:
    """Exchange application message listing payments."""

    payments: list[str]


@dataclass
class InteractionMsg:
    """The message that opens an interaction, carrying all signatures."""

    contract: Contract
    witnesses: list[PublicKey]
    witness_sigs: list[WitnessSig]
    interaction_sigs: list[InteractionSig]


@dataclass
class WitnessStatement:
    """A witness's statement of the outcome."""

    outcome: Outcome


Message = Union[InteractionMsg, WitnessStatement, CompensationMsg]


def find_associated_wnsig(sigs, did_pubkey: str) -> WitnessSig | None:
    """Return the first witness signature made by did_pubkey, or None."""
    return next((sig for sig in sigs if sig.signer_did_pubkey == did_pubkey), None)


def is_tx_msg(msg) -> bool:
    """Whether msg is the interaction message."""
    return isinstance(msg, InteractionMsg)


# ---- decoding helpers -------------------------------------------------------

def _obj(value: Any, where: str) -> dict:
    if not isinstance(value, dict):
        raise MessageFormatError(f"{where}: expected an object")
    return value


def _get(data: dict, name: str, where: str) -> Any:
    try:
        return data[name]
    except KeyError:
        raise MessageFormatError(f"{where}: missing field {name!r}") from None


def _list(value: Any, where: str) -> list:
    if not isinstance(value, list):
        raise MessageFormatError(f"{where}: expected an array")
    return value


def _tuple(value: Any, size: int, where: str) -> list:
    items = _list(value, where)
    if len(items) != size:
        raise MessageFormatError(f"{where}: expected {size} elements, got {len(items)}")
    return items


def _str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise MessageFormatError(f"{where}: expected a string")
    return value


def _bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise MessageFormatError(f"{where}: expected a boolean")
    return value


def _uint(value: Any, bits: int, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MessageFormatError(f"{where}: expected an unsigned integer")
    if not 0 <= value < 2**bits:
        raise MessageFormatError(f"{where}: {value} does not fit in u{bits}")
    return value


def _float(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MessageFormatError(f"{where}: expected a number")
    return float(value)


def _bytes(value: Any, where: str) -> bytes:
    return bytes(_uint(b, 8, f"{where}[{i}]") for i, b in enumerate(_list(value, where)))


def _variant(value: Any, where: str) -> tuple[str, Any]:
    if isinstance(value, dict) and len(value) == 1:
        return next(iter(value.items()))
    raise MessageFormatError(f"{where}: expected an object with a single variant key")


def _strings(value: Any, where: str) -> list[str]:
    return [_str(v, f"{where}[{i}]") for i, v in enumerate(_list(value, where))]


# ---- contracts --------------------------------------------------------------

def _coordinate_to_json(location: CoordinateDMS) -> list:
    return [[deg, mins, float(secs)] for deg, mins, secs in location]


def _coordinate_from_json(value: Any, where: str) -> CoordinateDMS:
    def ordinate(v: Any, w: str) -> Ordinate:
        deg, mins, secs = _tuple(v, 3, w)
        return (_uint(deg, 16, w), _uint(mins, 16, w), _float(secs, w))

    north, west = _tuple(value, 2, where)
    return (ordinate(north, f"{where}[0]"), ordinate(west, f"{where}[1]"))


def _recipient_to_json(recipient: UserOrWitnesses) -> Any:
    return "Witnesses" if recipient.user is None else {"User": recipient.user}


def _recipient_from_json(value: Any, where: str) -> UserOrWitnesses:
    if value == "Witnesses":
        return UserOrWitnesses()
    tag, payload = _variant(value, where)
    if tag != "User":
        raise MessageFormatError(f"{where}: unknown recipient {tag!r}")
    return UserOrWitnesses(_str(payload, where))


def _exchange_contract_to_json(c: ExchangeContract) -> dict:
    return {
        "channel_address": c.channel_address,
        "offer": c.offer,
        "participants": [[pk, name] for pk, name in c.participants],
        "compensation": [[_recipient_to_json(r), float(amount)] for r, amount in c.compensation],
        "time": c.time,
        "location": _coordinate_to_json(c.location),
        "timeout": c.timeout,
    }


def _exchange_contract_from_json(value: Any, where: str) -> ExchangeContract:
    data = _obj(value, where)
    participants = []
    for i, item in enumerate(_list(_get(data, "participants", where), f"{where}.participants")):
        w = f"{where}.participants[{i}]"
        pk, name = _tuple(item, 2, w)
        participants.append((_str(pk, w), _str(name, w)))
    compensation = []
    for i, item in enumerate(_list(_get(data, "compensation", where), f"{where}.compensation")):
        w = f"{where}.compensation[{i}]"
        recipient, amount = _tuple(item, 2, w)
        compensation.append((_recipient_from_json(recipient, w), _float(amount, w)))
    return ExchangeContract(
        channel_address=_str(_get(data, "channel_address", where), where),
        offer=_str(_get(data, "offer", where), where),
        participants=participants,
        compensation=compensation,
        time=_uint(_get(data, "time", where), 64, f"{where}.time"),
        location=_coordinate_from_json(_get(data, "location", where), f"{where}.location"),
        timeout=_uint(_get(data, "timeout", where), 64, f"{where}.timeout"),
    )


def _meeting_contract_to_json(c: MeetingContract) -> dict:
    return {
        "channel_address": c.channel_address,
        "purpose": c.purpose,
        "time": c.time,
        "location": _coordinate_to_json(c.location),
        "timeout": c.timeout,
    }


def _meeting_contract_from_json(value: Any, where: str) -> MeetingContract:
    data = _obj(value, where)
    return MeetingContract(
        channel_address=_str(_get(data, "channel_address", where), where),
        purpose=_str(_get(data, "purpose", where), where),
        time=_uint(_get(data, "time", where), 64, f"{where}.time"),
        location=_coordinate_from_json(_get(data, "location", where), f"{where}.location"),
        timeout=_uint(_get(data, "timeout", where), 32, f"{where}.timeout"),
    )


def _contract_to_json(contract: Contract) -> dict:
    if isinstance(contract, ExchangeContract):
        return {"ExchangeApplication": _exchange_contract_to_json(contract)}
    if isinstance(contract, MeetingContract):
        return {"MeetingApplication": _meeting_contract_to_json(contract)}
    raise TypeError(f"not a contract: {contract!r}")


def _contract_from_json(value: Any, where: str) -> Contract:
    tag, payload = _variant(value, where)
    if tag == "ExchangeApplication":
        return _exchange_contract_from_json(payload, f"{where}.{tag}")
    if tag == "MeetingApplication":
        return _meeting_contract_from_json(payload, f"{where}.{tag}")
    raise MessageFormatError(f"{where}: unknown contract {tag!r}")


def _outcome_to_json(outcome: Outcome) -> dict:
    if isinstance(outcome, MeetingContract):
        return {"MeetingApplication": _meeting_contract_to_json(outcome)}
    return {"ExchangeApplication": [bool(x) for x in outcome]}


def _outcome_from_json(value: Any, where: str) -> Outcome:
    tag, payload = _variant(value, where)
    if tag == "ExchangeApplication":
        return [_bool(v, f"{where}[{i}]") for i, v in enumerate(_list(payload, where))]
    if tag == "MeetingApplication":
        return _meeting_contract_from_json(payload, f"{where}.{tag}")
    raise MessageFormatError(f"{where}: unknown outcome {tag!r}")


# ---- signatures -------------------------------------------------------------

def _cert_to_json(cert: OrganizationCertificate) -> dict:
    return {
        "client_pubkey": cert.client_pubkey,
        "timeout": cert.timeout,
        "org_pubkey": cert.org_pubkey,
        "signature": list(cert.signature),
    }


def _cert_from_json(value: Any, where: str) -> OrganizationCertificate:
    data = _obj(value, where)
    return OrganizationCertificate(
        client_pubkey=_str(_get(data, "client_pubkey", where), where),
        timeout=_uint(_get(data, "timeout", where), 32, f"{where}.timeout"),
        org_pubkey=_str(_get(data, "org_pubkey", where), where),
        signature=_bytes(_get(data, "signature", where), f"{where}.signature"),
    )


def _witness_sig_to_json(sig: WitnessSig) -> dict:
    return {
        "contract": _contract_to_json(sig.contract),
        "signer_channel_pubkey": sig.signer_channel_pubkey,
        "org_cert": _cert_to_json(sig.org_cert),
        "timeout": sig.timeout,
        "signer_did_pubkey": sig.signer_did_pubkey,
        "signature": list(sig.signature),
    }


def _witness_sig_from_json(value: Any, where: str) -> WitnessSig:
    data = _obj(value, where)
    return WitnessSig(
        contract=_contract_from_json(_get(data, "contract", where), f"{where}.contract"),
        signer_channel_pubkey=_str(_get(data, "signer_channel_pubkey", where), where),
        org_cert=_cert_from_json(_get(data, "org_cert", where), f"{where}.org_cert"),
        timeout=_uint(_get(data, "timeout", where), 32, f"{where}.timeout"),
        signer_did_pubkey=_str(_get(data, "signer_did_pubkey", where), where),
        signature=_bytes(_get(data, "signature", where), f"{where}.signature"),
    )


def _interaction_sig_to_json(sig: InteractionSig) -> dict:
    return {
        "contract": _contract_to_json(sig.contract),
        "signer_channel_pubkey": sig.signer_channel_pubkey,
        "witnesses": list(sig.witnesses),
        "wit_node_sigs": [list(s) for s in sig.wit_node_sigs],
        "org_cert": _cert_to_json(sig.org_cert),
        "timeout": sig.timeout,
        "signer_did_pubkey": sig.signer_did_pubkey,
        "signature": list(sig.signature),
    }


def _interaction_sig_from_json(value: Any, where: str) -> InteractionSig:
    data = _obj(value, where)
    node_sigs = _list(_get(data, "wit_node_sigs", where), f"{where}.wit_node_sigs")
    return InteractionSig(
        contract=_contract_from_json(_get(data, "contract", where), f"{where}.contract"),
        signer_channel_pubkey=_str(_get(data, "signer_channel_pubkey", where), where),
        witnesses=_strings(_get(data, "witnesses", where), f"{where}.witnesses"),
        wit_node_sigs=[_bytes(s, f"{where}.wit_node_sigs[{i}]") for i, s in enumerate(node_sigs)],
        org_cert=_cert_from_json(_get(data, "org_cert", where), f"{where}.org_cert"),
        timeout=_uint(_get(data, "timeout", where), 32, f"{where}.timeout"),
        signer_did_pubkey=_str(_get(data, "signer_did_pubkey", where), where),
        signature=_bytes(_get(data, "signature", where), f"{where}.signature"),
    )


# ---- messages ---------------------------------------------------------------

def message_to_dict(msg) -> dict:
    """Encode a message as the JSON-ready structure used on the wire."""
    if isinstance(msg, InteractionMsg):
        return {
            "InteractionMsg": {
                "contract": _contract_to_json(msg.contract),
                "witnesses": list(msg.witnesses),
                "witness_sigs": [_witness_sig_to_json(s) for s in msg.witness_sigs],
                "interaction_sigs": [_interaction_sig_to_json(s) for s in msg.interaction_sigs],
            }
        }
    if isinstance(msg, WitnessStatement):
        return {"WitnessStatement": {"outcome": _outcome_to_json(msg.outcome)}}
    if isinstance(msg, CompensationMsg):
        return {"ApplicationMsg": {"ExchangeApplication": {"payments": list(msg.payments)}}}
    raise TypeError(f"not a message: {msg!r}")


def message_from_dict(data) -> Message:
    """Decode a message from its JSON-ready structure."""
    tag, payload = _variant(data, "message")
    where = f"message.{tag}"
    if tag == "InteractionMsg":
        body = _obj(payload, where)
        wsigs = _list(_get(body, "witness_sigs", where), f"{where}.witness_sigs")
        isigs = _list(_get(body, "interaction_sigs", where), f"{where}.interaction_sigs")
        return InteractionMsg(
            contract=_contract_from_json(_get(body, "contract", where), f"{where}.contract"),
            witnesses=_strings(_get(body, "witnesses", where), f"{where}.witnesses"),
            witness_sigs=[
                _witness_sig_from_json(s, f"{where}.witness_sigs[{i}]") for i, s in enumerate(wsigs)
            ],
            interaction_sigs=[
                _interaction_sig_from_json(s, f"{where}.interaction_sigs[{i}]")
                for i, s in enumerate(isigs)
            ],
        )
    if tag == "WitnessStatement":
        body = _obj(payload, where)
        return WitnessStatement(_outcome_from_json(_get(body, "outcome", where), f"{where}.outcome"))
    if tag == "ApplicationMsg":
        app_tag, app_payload = _variant(payload, where)
        if app_tag != "ExchangeApplication":
            raise MessageFormatError(f"{where}: unknown application message {app_tag!r}")
        body = _obj(app_payload, f"{where}.{app_tag}")
        return CompensationMsg(_strings(_get(body, "payments", where), f"{where}.payments"))
    raise MessageFormatError(f"message: unknown message kind {tag!r}")


def message_to_json(msg) -> str:
    """Encode a message as compact JSON text."""
    return json.dumps(message_to_dict(msg), separators=(",", ":"))


def message_from_json(text: str) -> Message:
    """Decode a message from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MessageFormatError(f"invalid JSON: {exc}") from exc
    return message_from_dict(data)