from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Response, status
from pydantic import BaseModel

from kubesnoop.api.dependencies import get_engine, get_rule_store
from kubesnoop.rules.engine import EvaluationEngine
from kubesnoop.rules.evaluator import evaluate_rule
from kubesnoop.rules.interface import RuleStore
from kubesnoop.rules.loaders.file_loader import ImportSummary, parse_rules, sync_rules
from kubesnoop.rules.models import RuleResult, SecurityRule
from kubesnoop.rules.registry import get_condition_catalogue

logger = structlog.get_logger(__name__)

router = APIRouter()


class RuleToggleRequest(BaseModel):
    enabled: bool


class DryRunRequest(BaseModel):
    document: dict[str, Any]
    resource: str = "Resource/dry-run"


@router.get("/rules", response_model=list[SecurityRule])
def list_rules(
    rule_type: str | None = None,
    enabled_only: bool = False,
    store: RuleStore = Depends(get_rule_store),
) -> list[SecurityRule]:
    if enabled_only:
        return store.get_enabled_rules(rule_type)
    return store.get_rules(rule_type)


@router.get("/rules/export", response_model=list[SecurityRule])
def export_rules(store: RuleStore = Depends(get_rule_store)) -> list[SecurityRule]:
    return store.get_rules()


@router.post("/rules/import")
def import_rules(
    payload: Any = Body(...),
    store: RuleStore = Depends(get_rule_store),
) -> ImportSummary:
    """Upsert rules by name. Accepts a list of rules or ``{"rules": [...]}``."""
    summary = sync_rules(store, parse_rules(payload, source="request"))
    logger.info("rules_imported", added=summary.added, updated=summary.updated)
    return summary


@router.get("/rules/{rule_id}", response_model=SecurityRule)
def get_rule(rule_id: int, store: RuleStore = Depends(get_rule_store)) -> SecurityRule:
    return store.get_rule(rule_id)


@router.post("/rules", response_model=SecurityRule, status_code=status.HTTP_201_CREATED)
def add_rule(rule: SecurityRule, store: RuleStore = Depends(get_rule_store)) -> SecurityRule:
    stored = store.add(rule)
    logger.info("rule_added", rule=stored.name, rule_id=stored.id)
    return stored


@router.put("/rules/{rule_id}", response_model=SecurityRule)
def update_rule(rule_id: int, rule: SecurityRule, store: RuleStore = Depends(get_rule_store)) -> SecurityRule:
    return store.update(rule_id, rule)


@router.patch("/rules/{rule_id}/enabled", response_model=SecurityRule)
def toggle_rule(
    rule_id: int,
    request: RuleToggleRequest,
    store: RuleStore = Depends(get_rule_store),
) -> SecurityRule:
    rule = store.set_enabled(rule_id, request.enabled)
    logger.info("rule_toggled", rule_id=rule_id, enabled=request.enabled)
    return rule


@router.delete("/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rule(rule_id: int, store: RuleStore = Depends(get_rule_store)) -> Response:
    store.delete(rule_id)
    logger.info("rule_deleted", rule_id=rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/rules/{rule_id}/dry-run", response_model=RuleResult)
def dry_run_rule(
    rule_id: int,
    request: DryRunRequest,
    store: RuleStore = Depends(get_rule_store),
    engine: EvaluationEngine = Depends(get_engine),
) -> RuleResult:
    """Evaluate one rule against a single document without touching the store."""
    rule = store.get_rule(rule_id)
    return evaluate_rule(rule, request.document, request.resource, engine.evaluator)


@router.get("/conditions")
def list_conditions() -> list[dict[str, Any]]:
    """Supported condition forms, in the order they are matched."""
    return get_condition_catalogue()
