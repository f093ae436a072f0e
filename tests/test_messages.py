import copy

import pytest

from trust_score.messages import (
    CompensationMsg,
    ExchangeContract,
    InteractionMsg,
    InteractionSig,
    MeetingContract,
    MessageFormatError,
    OrganizationCertificate,
    Sig,
    UserOrWitnesses,
    WitnessSig,
    WitnessStatement,
    find_associated_wnsig,
    is_tx_msg,
    message_from_dict,
    message_from_json,
    message_to_dict,
    message_to_json,
)


def _cert(org="org-main"):
    return OrganizationCertificate(
        client_pubkey="client-1", timeout=600, org_pubkey=org, signature=b"\x01\x02"
    )


def _contract():
    return ExchangeContract(
        channel_address="chan-addr",
        offer="bike repair",
        participants=[("did-alice", "Alice"), ("did-bob", "Bob")],
        compensation=[(UserOrWitnesses("did-alice"), 1.5), (UserOrWitnesses(), 0.5)],
        time=1_700_000_000,
        location=((52, 22, 12.5), (4, 53, 42.25)),
        timeout=1_700_003_600,
    )


def _meeting():
    return MeetingContract(
        channel_address="chan-meet",
        purpose="standup",
        time=1_700_000_000,
        location=((1, 2, 3.5), (4, 5, 6.0)),
        timeout=300,
    )


def _witness(name, org="org-main"):
    return WitnessSig(
        contract=_contract(),
        signer_channel_pubkey=f"chan-{name}",
        org_cert=_cert(org),
        timeout=600,
        signer_did_pubkey=f"did-{name}",
        signature=bytes([7, 8, 9]),
    )


def _interaction(name):
    return InteractionSig(
        contract=_contract(),
        signer_channel_pubkey=f"chan-{name}",
        witnesses=["did-wit1", "did-wit2"],
        wit_node_sigs=[b"\x00\xff", b"\x10"],
        org_cert=_cert(),
        timeout=600,
        signer_did_pubkey=f"did-{name}",
        signature=b"\xaa",
    )


def _tx():
    return InteractionMsg(
        contract=_contract(),
        witnesses=["did-wit1", "did-wit2"],
        witness_sigs=[_witness("wit1"), _witness("wit2", "org-other")],
        interaction_sigs=[_interaction("alice"), _interaction("bob")],
    )


@pytest.mark.parametrize(
    "msg",
    [
        _tx(),
        WitnessStatement([True, False, True]),
        WitnessStatement(_meeting()),
        CompensationMsg(["pay-1", "pay-2"]),
        InteractionMsg(contract=_meeting(), witnesses=[], witness_sigs=[], interaction_sigs=[]),
    ],
)
def test_json_round_trip(msg):
    assert message_from_json(message_to_json(msg)) == msg
    assert message_from_dict(message_to_dict(msg)) == msg


def test_witness_statement_wire_shape():
    assert message_to_dict(WitnessStatement([True, False])) == {
        "WitnessStatement": {"outcome": {"ExchangeApplication": [True, False]}}
    }


def test_compensation_wire_shape():
    assert message_to_dict(CompensationMsg(["p"])) == {
        "ApplicationMsg": {"ExchangeApplication": {"payments": ["p"]}}
    }


def test_recipients_encoding():
    data = message_to_dict(_tx())
    compensation = data["InteractionMsg"]["contract"]["ExchangeApplication"]["compensation"]
    assert compensation[0][0] == {"User": "did-alice"}
    assert compensation[1][0] == "Witnesses"


def test_signature_bytes_encoded_as_integers():
    tx = _tx()
    data = message_to_dict(tx)
    sig = data["InteractionMsg"]["interaction_sigs"][0]
    assert sig["signature"] == list(tx.interaction_sigs[0].signature)
    assert sig["wit_node_sigs"] == [list(s) for s in tx.interaction_sigs[0].wit_node_sigs]


def test_unknown_fields_ignored():
    data = message_to_dict(WitnessStatement([True]))
    data["WitnessStatement"]["extra"] = 1
    assert message_from_dict(data) == WitnessStatement([True])


def test_sig_accessors():
    w = _witness("wit1")
    i = _interaction("alice")
    assert (w.did_pubkey(), w.channel_pubkey()) == ("did-wit1", "chan-wit1")
    assert (i.did_pubkey(), i.channel_pubkey()) == ("did-alice", "chan-alice")


def test_sig_is_abstract():
    with pytest.raises(TypeError):
        Sig()


def test_find_associated_wnsig():
    sigs = [_witness("wit1"), _witness("wit2", "org-other")]
    found = find_associated_wnsig(sigs, "did-wit2")
    assert found is sigs[1]
    assert find_associated_wnsig(sigs, "did-nobody") is None


def test_is_tx_msg():
    assert is_tx_msg(_tx()) is True
    assert is_tx_msg(WitnessStatement([True])) is False
    assert is_tx_msg(CompensationMsg([])) is False


def test_invalid_json():
    with pytest.raises(MessageFormatError):
        message_from_json("{not json")


def test_unknown_message_kind():
    with pytest.raises(MessageFormatError):
        message_from_json('{"Bogus": {}}')


def test_missing_field():
    data = message_to_dict(WitnessStatement([True]))
    del data["WitnessStatement"]["outcome"]
    with pytest.raises(MessageFormatError):
        message_from_dict(data)


@pytest.mark.parametrize("bad", [2**32, -1, True, 5.0, "600"])
def test_bad_timeout_rejected(bad):
    data = message_to_dict(_tx())
    broken = copy.deepcopy(data)
    broken["InteractionMsg"]["witness_sigs"][0]["timeout"] = bad
    with pytest.raises(MessageFormatError):
        message_from_dict(broken)


def test_bad_outcome_value_rejected():
    with pytest.raises(MessageFormatError):
        message_from_dict({"WitnessStatement": {"outcome": {"ExchangeApplication": [1]}}})


def test_to_dict_rejects_non_message():
    with pytest.raises(TypeError):
        message_to_dict("hello")