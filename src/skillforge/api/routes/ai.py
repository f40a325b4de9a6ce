"""AI generation routes.

These never fail because of the completion provider: the gateway falls back
to local templates, so clients always receive a usable result.
"""

from __future__ import annotations

from fastapi import APIRouter

from skillforge.api.dependencies import GatewayDep
from skillforge.api.schemas.requests import (
    AssessmentGenerateRequest,
    InterviewAnswersRequest,
    InterviewGenerateRequest,
    RoadmapGenerateRequest,
)
from skillforge.models import AssessmentQuestion, InterviewDraft, InterviewEvaluation, RoadmapDraft

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/roadmap", response_model=RoadmapDraft)
async def generate_roadmap(data: RoadmapGenerateRequest, gateway: GatewayDep) -> RoadmapDraft:
    return await gateway.generate_roadmap(data.skill, data.level, data.target_role)


@router.post("/interview", response_model=InterviewDraft)
async def generate_interview(
    data: InterviewGenerateRequest, gateway: GatewayDep
) -> InterviewDraft:
    return await gateway.generate_mock_interview(data.role, data.experience)


@router.post("/evaluate", response_model=InterviewEvaluation)
async def evaluate_interview(
    data: InterviewAnswersRequest, gateway: GatewayDep
) -> InterviewEvaluation:
    return await gateway.evaluate_interview(data.questions)


@router.post("/assessment", response_model=list[AssessmentQuestion])
async def generate_assessment(
    data: AssessmentGenerateRequest, gateway: GatewayDep
) -> list[AssessmentQuestion]:
    return await gateway.generate_skill_assessment(data.skill)


@router.get("/status")
async def provider_status(gateway: GatewayDep) -> dict[str, bool]:
    """Report whether the completion provider answers a trivial prompt."""
    return {"connected": await gateway.test_connection()}
