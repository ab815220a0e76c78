
import json
import logging
import pytest
from slate_explore.decision import Decision, ExplorerState, PolicyProposal
from slate_explore.exploration.epsilon_greedy import ranking_probability
from slate_explore.observability.logging import log_decision

@pytest.fixture
def decision():
    return Decision(
        chosen_ranking=(1, 0),
        explorer_state=ExplorerState(epsilon=0.2, baseline_ranking=(0, 1), is_explore=True),
        policy_proposal=PolicyProposal(ranking=(0, 1)),
    )

def _last_payload(caplog):
    return json.loads(caplog.records[-1].getMessage())

def test_log_decision_emits_json_record(caplog, decision):
    with caplog.at_level(logging.INFO, logger="slate_explore"):
        log_decision("req-1", 42, decision, exploration_permitted=True)

    payload = _last_payload(caplog)
    assert payload["event"] == "decision_made"
    assert payload["event_id"] == "req-1"
    assert payload["seed"] == 42
    assert payload["exploration_permitted"] is True
    assert payload["record"] == decision.to_dict()

def test_gated_decision_replays_with_correct_propensity(caplog):
    # ゲートOFFで記録された判定は、ログだけから選択確率1.0を再現できること
    gated = Decision(
        chosen_ranking=(2, 0, 3, 1),
        explorer_state=ExplorerState(epsilon=0.3, baseline_ranking=(2, 0, 3, 1), is_explore=False),
        policy_proposal=PolicyProposal(ranking=(2, 0, 3, 1)),
    )
    with caplog.at_level(logging.INFO, logger="slate_explore"):
        log_decision("req-2", 7, gated, exploration_permitted=False)

    payload = _last_payload(caplog)
    replayed = Decision.from_dict(payload["record"])
    probability = ranking_probability(
        replayed.explorer_state,
        replayed.chosen_ranking,
        exploration_permitted=payload["exploration_permitted"],
    )
    assert payload["exploration_permitted"] is False
    assert probability == 1.0

def test_log_decision_tolerates_opaque_policy_state(caplog):
    decision = Decision(
        chosen_ranking=(0,),
        explorer_state=ExplorerState(epsilon=0.0, baseline_ranking=(0,), is_explore=False),
        policy_proposal=PolicyProposal(ranking=(0,), policy_state={"model": object()}),
    )
    with caplog.at_level(logging.INFO, logger="slate_explore"):
        log_decision("req-3", 1, decision, exploration_permitted=True)

    assert _last_payload(caplog)["record"]["policyProposal"]["policyState"]["model"].startswith("<object")
