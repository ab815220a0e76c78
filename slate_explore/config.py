
import logging
import time
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dataclasses import dataclass
from typing import Dict, Optional

from slate_explore.errors import ConfigurationError

logger = logging.getLogger(__name__)

PARAM_STRATEGY = '/reco/explore/strategy'
PARAM_EPSILON = '/reco/explore/epsilon'
PARAM_ENABLED = '/reco/explore/enabled'
PARAM_SAMPLING_RATE = '/reco/explore/sampling_rate'
PARAM_MAX_ACTIONS = '/reco/explore/max_actions'

@dataclass
class ExplorationConfig:
    epsilon: float
    exploration_enabled: bool
    sampling_rate: float
    strategy: str = "epsilon_greedy"
    max_actions: Optional[int] = None

class ConfigManager:
    def __init__(self, ttl_seconds: float = 60.0):
        self.ttl_seconds = ttl_seconds
        self._cached_config: Optional[ExplorationConfig] = None
        self._last_fetched_at: float = 0.0
        self._ssm_client = boto3.client('ssm')

    def get_config(self) -> ExplorationConfig:
        current_time = time.time()

        if self._cached_config and (current_time - self._last_fetched_at < self.ttl_seconds):
            return self._cached_config

        try:
            config = self._fetch_from_ssm()
        except (BotoCoreError, ClientError, ValueError) as e:
            # ConfigurationError is a ValueError
            logger.warning("falling back to default exploration config: %s", e)
            return self._get_default_config()

        self._cached_config = config
        self._last_fetched_at = current_time
        return config

    def _fetch_from_ssm(self) -> ExplorationConfig:
        names = [
            PARAM_STRATEGY,
            PARAM_EPSILON,
            PARAM_ENABLED,
            PARAM_SAMPLING_RATE,
            PARAM_MAX_ACTIONS,
        ]

        response = self._ssm_client.get_parameters(Names=names)
        params: Dict[str, str] = {p['Name']: p['Value'] for p in response.get('Parameters', [])}

        epsilon = float(params.get(PARAM_EPSILON, '0.0'))
        if not 0.0 <= epsilon <= 1.0:
            raise ConfigurationError(f"{PARAM_EPSILON} must be in [0, 1], got {epsilon}")

        sampling_rate = float(params.get(PARAM_SAMPLING_RATE, '0.0'))

        # "true" (case-insensitive) のみ有効とみなす
        enabled = params.get(PARAM_ENABLED, 'false').lower() == 'true'

        max_actions_str = params.get(PARAM_MAX_ACTIONS)
        max_actions = int(max_actions_str) if max_actions_str else None

        return ExplorationConfig(
            epsilon=epsilon,
            exploration_enabled=enabled,
            sampling_rate=sampling_rate,
            strategy=params.get(PARAM_STRATEGY, 'epsilon_greedy'),
            max_actions=max_actions
        )

    def _get_default_config(self) -> ExplorationConfig:
        # 安全側に倒す(探索なし)
        return ExplorationConfig(
            epsilon=0.0,
            exploration_enabled=False,
            sampling_rate=0.0,
            strategy="epsilon_greedy"
        )
