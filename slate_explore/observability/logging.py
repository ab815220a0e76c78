
import json
import logging
from slate_explore.decision import Decision

logger = logging.getLogger("slate_explore")
logger.setLevel(logging.INFO)
# Handler設定は実行環境に依存するため、ここでは標準出力への出力のみを想定
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)

def log_decision(event_id: str, seed: int, decision: Decision, exploration_permitted: bool):
    """
    探索判定の結果を構造化ログ(JSON)として出力する。
    seed・baselineRanking・exploration_permitted があれば
    オフラインで判定と選択確率(propensity)を再現できる。
    """

    log_data = {
        "event": "decision_made",
        "event_id": event_id,
        "seed": seed,
        "exploration_permitted": exploration_permitted,
        "record": decision.to_dict()
    }

    # policyStateはJSON化できない値を含みうるためrepr()で代替
    logger.info(json.dumps(log_data, sort_keys=True, default=repr))
