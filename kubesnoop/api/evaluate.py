from fastapi import APIRouter, Depends
from pydantic import BaseModel

from kubesnoop.api.dependencies import get_engine
from kubesnoop.collector.snapshot import ClusterSnapshot
from kubesnoop.core.models import Finding, FindingSummary
from kubesnoop.rules.engine import EvaluationEngine

router = APIRouter()


class EvaluationResponse(BaseModel):
    findings: list[Finding]
    summary: FindingSummary


@router.post("/evaluate", response_model=EvaluationResponse)
def evaluate_snapshot(
    snapshot: ClusterSnapshot,
    engine: EvaluationEngine = Depends(get_engine),
) -> EvaluationResponse:
    findings = engine.evaluate_all(snapshot)
    return EvaluationResponse(findings=findings, summary=engine.summarize(findings))
