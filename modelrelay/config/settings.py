"""
Relay settings.

``RelayConfig`` is the explicit configuration struct handed to the
orchestrator and registry at process start. It is read from a JSON file
through ``ConfigService``.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from modelrelay.core.context_assembler import DEFAULT_IGNORE_PATTERNS, DEFAULT_WORK_DIR
from modelrelay.core.prompts import MODIFICATIONS_TAG_NAME
from modelrelay.services.config_service import ConfigService

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MODELRELAY_CONFIG"

DEFAULT_PROVIDER = "Anthropic"
DEFAULT_MODEL = "claude-3-5-sonnet-latest"
# Fallback generation budget when the active model has no catalog entry
MAX_TOKENS = 8000


class ContextBudgetPolicy(Enum):
    """What to do when the workspace context exceeds ``context_max_tokens``."""
    WARN = "warn"
    DROP_FILES = "drop_files"


@dataclass
class RelayConfig:
    default_provider: str = DEFAULT_PROVIDER
    default_model: str = DEFAULT_MODEL
    max_tokens: int = MAX_TOKENS
    work_dir: str = DEFAULT_WORK_DIR
    ignore_patterns: Tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    catalog_fetch_timeout: float = 10.0
    context_max_tokens: int = 0  # 0: use the request's token budget
    context_budget_policy: ContextBudgetPolicy = ContextBudgetPolicy.WARN
    modification_tag_name: str = MODIFICATIONS_TAG_NAME
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RelayConfig":
        known = {f.name for f in fields(cls)} - {"extra"}
        values = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}

        if "ignore_patterns" in values:
            values["ignore_patterns"] = tuple(values["ignore_patterns"] or ())
        if "context_budget_policy" in values:
            values["context_budget_policy"] = ContextBudgetPolicy(values["context_budget_policy"])
        for key in ("max_tokens", "context_max_tokens"):
            if key in values:
                values[key] = int(values[key])
        if "catalog_fetch_timeout" in values:
            values["catalog_fetch_timeout"] = float(values["catalog_fetch_timeout"])

        return cls(extra=extra, **values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_provider": self.default_provider,
            "default_model": self.default_model,
            "max_tokens": self.max_tokens,
            "work_dir": self.work_dir,
            "ignore_patterns": list(self.ignore_patterns),
            "catalog_fetch_timeout": self.catalog_fetch_timeout,
            "context_max_tokens": self.context_max_tokens,
            "context_budget_policy": self.context_budget_policy.value,
            "modification_tag_name": self.modification_tag_name,
            **self.extra,
        }


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Priority:
    1. Explicit path (--config)
    2. MODELRELAY_CONFIG environment variable
    3. ~/.modelrelay/config.json
    """
    chosen = path or os.environ.get(CONFIG_ENV_VAR)
    if chosen:
        return Path(chosen).expanduser()
    return ConfigService().config_path


def load_config(path: Optional[Union[str, Path]] = None) -> RelayConfig:
    """
    Load ``RelayConfig`` from the config file.

    A missing file yields defaults.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid values
    """
    service = ConfigService(config_path=resolve_config_path(path))
    config = RelayConfig.from_dict(service.load())
    if config.extra:
        logger.debug(f"Ignoring unknown config keys: {sorted(config.extra)}")
    return config


def save_config(config: RelayConfig, path: Optional[Union[str, Path]] = None) -> bool:
    service = ConfigService(config_path=resolve_config_path(path))
    return service.save(config.to_dict())
