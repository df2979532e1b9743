from modelrelay.config.settings import RelayConfig, ContextBudgetPolicy, load_config

__all__ = ["RelayConfig", "ContextBudgetPolicy", "load_config"]
