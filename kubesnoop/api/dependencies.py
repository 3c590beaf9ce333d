from functools import lru_cache

from fastapi import Depends

from kubesnoop.core.config import config
from kubesnoop.rules.engine import EvaluationEngine
from kubesnoop.rules.interface import RuleStore
from kubesnoop.rules.stores import create_rule_store

# --- Store Dependencies ---  # DI: override in tests with app.dependency_overrides.


@lru_cache(maxsize=1)
def get_rule_store() -> RuleStore:
    """
    Build the configured rule store once per process and seed the default rules.
    """
    return create_rule_store(config.rule_store)


def get_engine(store: RuleStore = Depends(get_rule_store)) -> EvaluationEngine:
    return EvaluationEngine(store)
