"""
Configuration model and loading for the hookrelay service.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = '/config/hookrelay.yaml'


_config: Optional['RelayConfig'] = None


class RelayConfig(BaseModel):
    """
    Process-wide relay settings. Loaded once at startup and never
    modified afterwards.
    """

    host: str = '0.0.0.0'
    port: int = Field(default=8080, gt=0, lt=65536)

    webhook_secret: str = Field(min_length=1)

    upstream_repo: str = 'Wei-Shaw/claude-relay-service'
    target_repo: str = 'DuanNaiSheQu/claude-duannai'

    github_token: Optional[str] = None
    github_api_url: str = 'https://api.github.com'
    dispatch_timeout: float = Field(default=5.0, gt=0)

    model_config = {'frozen': True}


    @property
    def dispatch_url(self) -> str:
        """
        The repository dispatch endpoint for the target repository
        """

        return f'{self.github_api_url.rstrip("/")}/repos/{self.target_repo}/dispatches'


def _config_from_env() -> Dict[str, Any]:
    """
    Build configuration dictionary from HOOKRELAY_* environment variables.
    """

    config = {}
    pairs = (
        ('HOOKRELAY_HOST', 'host'),
        ('HOOKRELAY_PORT', 'port'),
        ('HOOKRELAY_WEBHOOK_SECRET', 'webhook_secret'),
        ('HOOKRELAY_UPSTREAM_REPO', 'upstream_repo'),
        ('HOOKRELAY_TARGET_REPO', 'target_repo'),
        ('HOOKRELAY_GITHUB_TOKEN', 'github_token'),
        ('HOOKRELAY_GITHUB_API_URL', 'github_api_url'),
        ('HOOKRELAY_DISPATCH_TIMEOUT', 'dispatch_timeout'))

    for env_var, config_key in pairs:
        value = os.environ.get(env_var)
        if value is not None:
            config[config_key] = value

    return config


def load_config() -> RelayConfig:
    """
    Load the configuration from the optional YAML file at CONFIG_PATH,
    with any HOOKRELAY_* environment variables taking precedence.
    """

    config_path = os.environ.get('CONFIG_PATH', DEFAULT_CONFIG_PATH)

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}
        config_data.update(_config_from_env())
    else:
        config_data = _config_from_env()

    config = RelayConfig.model_validate(config_data)
    logger.info(f'Loaded configuration relaying {config.upstream_repo} to {config.target_repo}')
    return config


def get_config() -> RelayConfig:
    """
    Get the process configuration, loading it on first use.
    """

    global _config

    if _config is None:
        _config = load_config()

    return _config


# The end.
