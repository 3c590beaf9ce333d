"""Rule store implementations."""

import structlog

from kubesnoop.core.config.rule_store_config import RuleStoreConfig
from kubesnoop.rules.interface import RuleStore
from kubesnoop.rules.stores.memory import InMemoryRuleStore
from kubesnoop.rules.stores.sqlite import SQLiteRuleStore

logger = structlog.get_logger(__name__)


def create_rule_store(settings: RuleStoreConfig) -> RuleStore:
    """Build the configured rule store and seed the default rules when enabled."""
    store: RuleStore
    if settings.backend == "memory":
        store = InMemoryRuleStore()
    else:
        store = SQLiteRuleStore(settings.database_url)

    if settings.seed_defaults:
        seeded = store.seed_defaults()
        if seeded:
            logger.info("default_rules_seeded", count=seeded)
    return store


__all__ = [
    "InMemoryRuleStore",
    "SQLiteRuleStore",
    "create_rule_store",
]
