import pytest

from trust_score.predict import predict_outcome


def test_predict_outcome_from_source():
    ws = [[True, True], [False, True], [True, False], [False, False]]
    reliabilities = [1.0, 1.0, 0.0, 1.0]
    assert predict_outcome(ws, reliabilities) == [False, True]


def test_single_statement_is_followed():
    statement = [True, False, True]
    assert predict_outcome([statement], [1.0]) == statement


def test_balanced_votes_predict_false():
    assert predict_outcome([[True], [False]], [1.0, 1.0]) == [False]


def test_zero_weights_predict_false_everywhere():
    assert predict_outcome([[True, True], [True, True]], [0.0, 0.0]) == [False, False]


def test_result_length_follows_first_statement():
    result = predict_outcome([[True, True], [True, True, False]], [1.0, 1.0])
    assert len(result) == 2


def test_no_statements_raises():
    with pytest.raises(ValueError):
        predict_outcome([], [])


def test_missing_reputation_raises():
    with pytest.raises(ValueError):
        predict_outcome([[True], [False]], [1.0])


def test_short_statement_raises():
    with pytest.raises(ValueError):
        predict_outcome([[True, True], [True]], [1.0, 1.0])