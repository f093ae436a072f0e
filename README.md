# trust_score

A small library for judging the participants of an event-protocol interaction.
It decodes the messages exchanged during an interaction. It works out how
reliable each transacting node and witness was, and keeps a per-user
reputation map built from those verdicts.

## Installation

```
pip install .
```

## Modules

- `trust_score.messages`: the protocol's message types and their JSON form.
  - `InteractionMsg` carries the contract, the witnesses and everyone's
    signatures (`WitnessSig`, `InteractionSig`).
  - `WitnessStatement` carries a witness's outcome. An exchange outcome is a
    list of booleans.
  - `CompensationMsg` lists payments.
  - Contracts are `ExchangeContract` or `MeetingContract`.
  - `message_to_json` / `message_from_json` and `message_to_dict` /
    `message_from_dict` convert messages to and from their wire form.
  - A malformed document raises `MessageFormatError`.
  - `is_tx_msg` tells whether a message is the interaction message.
  - `find_associated_wnsig` finds a witness signature by its signer's DID key.
- `trust_score.tsg_message`: `MessageAndPubkey` pairs a decoded message with
  its sender's DID public key. It offers these helpers:
  - `is_tx_msg`
  - `is_witness_statement_msg`
  - `get_witness_statement`
  - `get_sigs_of_participants`, which returns the transacting signatures, then
    the witness signatures.
- `trust_score.parsing`: `parse_messages` takes `(json_text, channel_pubkey)`
  pairs and returns `MessageAndPubkey` objects.
  - The first pair must be the interaction message. Its signatures map each
    channel public key to a DID public key.
  - An empty conversation raises `ParseError`, as do a first message of
    another kind and an unknown channel key.
  - `parse_to_message`, `get_sigs` and `find_did_pk_from_channel_pk` are the
    building blocks.
- `trust_score.verdict`: `Verdict` holds a list of `ParticipantVerdict`
  (`did_public_key`, `estimated_reliability`). `generate_tx_verdict` pairs
  signatures with reliabilities.
- `trust_score.predict`: `predict_outcome` weighs each witness statement by a
  reputation. An entry is predicted true when its weighted total is above zero.
- `trust_score.tsg`: trust score generators. Both return a pair of verdicts:
  first for the transacting nodes, then for the witnesses.
  - `tsg_know_outcome` / `TsgKnowOutcome` judge everyone against an outcome
    known to be true.
    - Witnesses who agree with the outcome get 1.0, the others 0.0.
    - Each transacting node gets 1.0 where the outcome is true and 0.0 where
      it is false.
  - `tsg_organization` / `TsgOrganization` predict the outcome first.
    - Witnesses certified by `org_pubkey` weigh 1.0; the others weigh
      `default_reputation`.
    - Everyone is then judged against that prediction.
  - The functions return `None` when a witness statement is not an exchange
    outcome. The classes raise `ValueError` in that case.
  - Custom generators subclass `TsgFramework` and implement `tsg_algorithm`.
- `trust_score.identity`: `Identity` keeps a reputation map and checks
  participants against a threshold.

## Example

```python
from trust_score.identity import Identity
from trust_score.parsing import parse_messages
from trust_score.tsg import TsgKnowOutcome

# raw: list of (message JSON, sender channel public key); the first is the InteractionMsg
msgs = parse_messages(raw)

user = Identity(
    channel_client=None,
    id_info=None,
    user_reputation_threshold=0.5,
    user_default_reputation=0.5,
)
user.run_tsg_and_include_in_rm(msgs, TsgKnowOutcome(known_outcome=[True, True]))

print(user.get_reputation_scores_string())
print(user.check_participant("did-key-of-someone"))
```

## How reputation is scored

Each entry in `reputation_map` is a `(sum_of_estimates, count)` pair. The score
is `sum / count`. A participant with no estimates scores
`user_default_reputation`. Checking an unknown participant adds an empty entry
for them.

- `check_participant` compares one participant's score with
  `user_reputation_threshold`.
- `check_all_participants` requires every participant to pass.
- `check_avg_participants` compares the group's average score with the
  threshold. An empty group fails.
- `get_reputation_scores_string` gives one `key: score` line per entry.

## What it does not do

The package only works on messages it is handed:

- It does not send or receive messages over any channel. `channel_client` is
  stored but never used.
- It does not verify signatures or certificates.
- It has no command-line interface and no storage.

## Running the tests

```
pip install .[test]
pytest
```