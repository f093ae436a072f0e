from trust_score.messages import (
    CompensationMsg,
    ExchangeContract,
    InteractionMsg,
    InteractionSig,
    OrganizationCertificate,
    UserOrWitnesses,
    WitnessSig,
    WitnessStatement,
)
from trust_score.tsg_message import MessageAndPubkey


def _contract():
    return ExchangeContract(
        channel_address="chan-addr",
        offer="bike repair",
        participants=[("did-alice", "Alice")],
        compensation=[(UserOrWitnesses(), 1.0)],
        time=1_700_000_000,
        location=((1, 2, 3.0), (4, 5, 6.0)),
        timeout=1_700_003_600,
    )


def _cert():
    return OrganizationCertificate("client-1", 600, "org-main", b"\x01")


def _tx():
    return InteractionMsg(
        contract=_contract(),
        witnesses=["did-wit1"],
        witness_sigs=[
            WitnessSig(_contract(), "chan-wit1", _cert(), 600, "did-wit1", b"\x02")
        ],
        interaction_sigs=[
            InteractionSig(
                _contract(), "chan-alice", ["did-wit1"], [b"\x02"], _cert(), 600, "did-alice", b"\x03"
            )
        ],
    )


def test_tx_message_predicates():
    wrapped = MessageAndPubkey(_tx(), "did-alice")
    assert wrapped.is_tx_msg() is True
    assert wrapped.is_witness_statement_msg() is False
    assert wrapped.get_witness_statement() is None


def test_witness_statement_predicates():
    wrapped = MessageAndPubkey(WitnessStatement([True, False]), "did-wit1")
    assert wrapped.is_tx_msg() is False
    assert wrapped.is_witness_statement_msg() is True
    assert wrapped.get_witness_statement() == [True, False]
    assert wrapped.get_sigs_of_participants() is None


def test_get_witness_statement_is_a_copy():
    msg = WitnessStatement([True])
    wrapped = MessageAndPubkey(msg, "did-wit1")
    outcome = wrapped.get_witness_statement()
    outcome.append(False)
    assert msg.outcome == [True]


def test_get_sigs_of_participants_order():
    tx = _tx()
    tn_sigs, wn_sigs = MessageAndPubkey(tx, "did-alice").get_sigs_of_participants()
    assert tn_sigs == tx.interaction_sigs
    assert wn_sigs == tx.witness_sigs
    tn_sigs.clear()
    assert len(tx.interaction_sigs) == 1


def test_compensation_message_has_neither():
    wrapped = MessageAndPubkey(CompensationMsg(["p"]), "did-alice")
    assert wrapped.is_tx_msg() is False
    assert wrapped.is_witness_statement_msg() is False
    assert wrapped.get_sigs_of_participants() is None