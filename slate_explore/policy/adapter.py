
from typing import Any, Callable, Dict, List
from slate_explore.decision import PolicyProposal, as_ranking
from slate_explore.policy.base import Policy

class LambdaPolicyAdapter(Policy):
    """
    既存のLambda/関数ベースのスコアリングロジックをラップし、
    Policyインターフェースに適合させるアダプター
    """
    def __init__(self, logic_func: Callable[[Any, int], List[Dict[str, Any]]]):
        self.logic_func = logic_func

    def decide(self, context: Any, expected_count: int) -> PolicyProposal:
        raw_results = self.logic_func(context, expected_count)

        # score降順、同点はaction番号の昇順
        ranked = sorted(
            raw_results,
            key=lambda raw: (-float(raw.get('score', 0.0)), raw['action'])
        )

        return PolicyProposal(
            ranking=as_ranking(raw['action'] for raw in ranked),
            policy_state={'scores': [float(raw.get('score', 0.0)) for raw in ranked]}
        )
