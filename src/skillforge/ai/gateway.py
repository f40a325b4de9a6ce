"""AI content gateway.

Each entry point runs a primary provider call that returns a
:class:`GenerationResult` and then unwraps it, substituting a local
template on any :class:`GenerationError`. The four public generators
therefore never raise for provider, network or parsing problems.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from skillforge.ai import templates
from skillforge.ai.json_extract import JSONExtractionError, extract_json_object
from skillforge.ai.llm_providers import LLMError
from skillforge.ai.llm_service import LLMService
from skillforge.models import (
    AssessmentQuestion,
    InterviewDraft,
    InterviewEvaluation,
    InterviewQuestion,
    RoadmapDraft,
)
from skillforge.models.entities import Difficulty

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_ANSWERS_FEEDBACK = "No answers provided. Please answer the questions to receive feedback."

TECHNICAL_KEYWORDS = (
    "implement",
    "design",
    "architecture",
    "performance",
    "optimize",
    "debug",
    "test",
    "framework",
    "database",
    "api",
    "security",
    "scalability",
)

_RESOURCE_TYPES = {"video", "article", "course", "book", "practice"}
_LEVELS = {"beginner", "intermediate", "advanced"}

SYSTEM_INSTRUCTIONS = (
    "You are SkillForge's career-coaching assistant. "
    "Reply with a single JSON object and nothing else."
)


class GenerationError(Exception):
    """A primary AI call failed; ``kind`` names the failure category."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True, slots=True)
class GenerationResult(Generic[T]):
    """Either a generated value or the error that prevented it."""

    value: T | None = None
    error: GenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or_else(self, fallback: Callable[[GenerationError], T]) -> T:
        if self.error is not None:
            return fallback(self.error)
        return self.value  # type: ignore[return-value]


# Prompts


def roadmap_prompt(skill: str, level: str, target_role: str) -> str:
    return f"""Create a comprehensive learning roadmap for {skill} skill development.

Context:
- Current Level: {level}
- Target Role: {target_role}
- Skill: {skill}

Respond with a single JSON object in exactly this shape:

{{
  "title": "Complete {skill} Learning Path for {target_role}",
  "description": "Roadmap to master {skill} from {level} to {target_role} level",
  "skill": "{skill}",
  "estimatedDuration": "8-12 weeks",
  "difficulty": "{level}",
  "steps": [
    {{
      "title": "Step title",
      "description": "What to learn in this step",
      "estimatedTime": "1-2 weeks",
      "resources": [
        {{"title": "Official Documentation", "type": "article", "url": "https://..."}}
      ]
    }}
  ]
}}

Use real, working URLs. Each step should have 3-4 resources of different types
(article, video, course, practice, book). Provide 6-8 steps. Return only valid JSON."""


def interview_prompt(role: str, experience: str) -> str:
    return f"""Generate 5 realistic interview questions for a {role} position with {experience} experience level.

Requirements:
- Questions should be appropriate for the experience level
- Mix of technical and behavioral questions
- Questions should be realistic and commonly asked

Respond with a single JSON object in exactly this shape:

{{
  "role": "{role}",
  "questions": [
    {{"question": "Tell me about yourself and your experience with [relevant technology]."}}
  ]
}}

Return only valid JSON."""


def evaluation_prompt(answered: list[InterviewQuestion]) -> str:
    transcript = "\n".join(
        f"Question {index}: {question.question}\nAnswer: {question.answer}\n"
        for index, question in enumerate(answered, start=1)
    )
    return f"""Evaluate these interview answers and provide detailed feedback:

{transcript}
Respond with a single JSON object in exactly this shape:

{{
  "score": 75,
  "feedback": "Overall Performance: 75/100\\n\\nStrengths:\\n- ...\\n\\nAreas for Improvement:\\n- ..."
}}

Score must be 0-100. Feedback should be detailed and constructive. Return only valid JSON."""


def assessment_prompt(skill: str) -> str:
    return f"""Generate 5 technical assessment questions for {skill}.

Requirements:
- Multiple choice questions with 4 options each
- Progressive difficulty from basic to intermediate
- Include explanations for correct answers

Respond with a single JSON object in exactly this shape:

{{
  "questions": [
    {{
      "question": "What is the primary purpose of {skill}?",
      "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
      "correctAnswer": 0,
      "explanation": "Why this answer is correct"
    }}
  ]
}}

Return only valid JSON."""


# Response parsing


def _require_list(data: dict[str, Any], field: str) -> list[Any]:
    value = data.get(field)
    if not isinstance(value, list) or not value:
        raise GenerationError("invalid_shape", f"Response is missing a non-empty '{field}' array")
    return value


def parse_roadmap(data: dict[str, Any], skill: str, level: Difficulty) -> RoadmapDraft:
    raw_steps = _require_list(data, "steps")
    steps = []
    for index, raw in enumerate(raw_steps, start=1):
        if not isinstance(raw, dict):
            raise GenerationError("invalid_shape", f"Step {index} is not an object")
        title = str(raw.get("title") or f"Step {index}")
        raw_resources = raw.get("resources") or []
        if not isinstance(raw_resources, list):
            raise GenerationError("invalid_shape", f"Step {index} resources is not an array")
        resources = [
            {
                "id": f"resource-{position}",
                "title": str(resource.get("title") or "Resource"),
                "type": resource.get("type") if resource.get("type") in _RESOURCE_TYPES else "article",
                "url": str(resource.get("url") or "#"),
            }
            for position, resource in enumerate(raw_resources, start=1)
            if isinstance(resource, dict)
        ]
        if not resources:
            resources = [resource.model_dump() for resource in templates.resources_for(title)]
        steps.append(
            {
                "id": f"step-{index}",
                "title": title,
                "description": str(raw.get("description") or "No description provided"),
                "resources": resources,
                "estimated_time": str(raw.get("estimatedTime") or "1 week"),
                "order": index,
            }
        )

    difficulty = data.get("difficulty")
    try:
        return RoadmapDraft(
            title=str(data.get("title") or f"{skill} Learning Path"),
            description=str(data.get("description") or f"Learn {skill} effectively"),
            skill=str(data.get("skill") or skill),
            steps=steps,
            estimated_duration=str(data.get("estimatedDuration") or "8 weeks"),
            difficulty=difficulty if difficulty in _LEVELS else level,
        )
    except ValidationError as exc:
        raise GenerationError("invalid_shape", f"Roadmap failed validation: {exc}") from exc


def parse_interview(data: dict[str, Any], role: str) -> InterviewDraft:
    raw_questions = _require_list(data, "questions")
    questions = []
    for index, raw in enumerate(raw_questions, start=1):
        text = raw.get("question") if isinstance(raw, dict) else raw
        if not isinstance(text, str) or not text.strip():
            raise GenerationError("invalid_shape", f"Question {index} has no text")
        questions.append(InterviewQuestion(id=f"question-{index}", question=text.strip()))
    return InterviewDraft(role=str(data.get("role") or role), questions=questions)


def parse_evaluation(data: dict[str, Any]) -> InterviewEvaluation:
    score = data.get("score")
    feedback = data.get("feedback")
    if not isinstance(score, int | float) or isinstance(score, bool):
        raise GenerationError("invalid_shape", "Evaluation is missing a numeric 'score'")
    if not math.isfinite(score):
        raise GenerationError("invalid_shape", "Evaluation score is not a finite number")
    if not isinstance(feedback, str) or not feedback.strip():
        raise GenerationError("invalid_shape", "Evaluation is missing 'feedback'")
    return InterviewEvaluation(feedback=feedback, score=min(100, max(0, round(score))))


def parse_assessment(data: dict[str, Any]) -> list[AssessmentQuestion]:
    raw_questions = _require_list(data, "questions")
    try:
        questions = [AssessmentQuestion.model_validate(raw) for raw in raw_questions]
    except ValidationError as exc:
        raise GenerationError("invalid_shape", f"Assessment failed validation: {exc}") from exc
    for question in questions:
        if question.correct_answer >= len(question.options):
            raise GenerationError("invalid_shape", "correctAnswer is out of range")
    return questions


# Heuristic evaluation


@dataclass(frozen=True, slots=True)
class _Bucket:
    min_words: int
    min_chars: int
    base: float
    spread: float
    feedback: str
    strength: str | None = None
    improvement: str | None = None


# Checked in order; the first bucket whose thresholds are exceeded wins.
_BUCKETS = (
    _Bucket(50, 300, 85, 15, "Comprehensive and detailed answer with good depth.",
            strength="Provides thorough explanations"),
    _Bucket(30, 200, 75, 10, "Good answer with adequate detail.", strength="Clear communication"),
    _Bucket(20, 100, 65, 10, "Basic answer, could benefit from more examples.",
            improvement="Provide more specific examples"),
    _Bucket(10, 50, 50, 15, "Brief answer, needs more elaboration.",
            improvement="Expand on key points"),
)
_SHORT_BUCKET = _Bucket(0, 0, 30, 20, "Very brief answer, requires significant expansion.",
                        improvement="Provide much more detail")

_BANDS = (
    (85, "Excellent Performance!",
     "You demonstrated strong knowledge and excellent communication skills. "
     "You're well-prepared for interviews at this level.",
     "Next Steps",
     ("Consider applying for senior-level positions", "Practice system design questions",
      "Prepare leadership and mentoring examples")),
    (70, "Good Performance!",
     "You have a solid foundation and good communication skills. "
     "With some refinement, you'll be ready for most interviews.",
     "Recommendations",
     ("Practice providing more detailed technical examples",
      "Prepare specific metrics and outcomes from your projects",
      "Work on explaining complex concepts simply")),
    (55, "Room for Improvement",
     "You have the basic knowledge but need to work on articulating your thoughts "
     "more clearly and providing more depth.",
     "Focus Areas",
     ("Practice the STAR method (Situation, Task, Action, Result)",
      "Prepare detailed examples from your experience",
      "Study common interview questions for your role")),
    (0, "Keep Learning!",
     "This is a great start! Focus on building your knowledge and practicing "
     "your communication skills.",
     "Study Plan",
     ("Review fundamental concepts for your target role",
      "Practice explaining technical concepts out loud",
      "Take more mock interviews to build confidence")),
)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _bucket_for(answer: str) -> _Bucket:
    words = len(answer.split())
    for bucket in _BUCKETS:
        if words >= bucket.min_words and len(answer) > bucket.min_chars:
            return bucket
    return _SHORT_BUCKET


def keyword_bonus(answer: str) -> int:
    lowered = answer.lower()
    matches = sum(1 for keyword in TECHNICAL_KEYWORDS if keyword in lowered)
    return min(matches * 2, 10)


def heuristic_evaluation(
    questions: list[InterviewQuestion], rng: random.Random | None = None
) -> InterviewEvaluation:
    """Score answers by length and word count, with a bonus for technical terms.

    Unanswered questions are left out of the average but lower the reported
    completion rate.
    """
    rng = rng or random.Random()
    answered = [question for question in questions if question.is_answered]
    if not answered:
        return InterviewEvaluation(feedback=NO_ANSWERS_FEEDBACK, score=0)

    total = 0.0
    strengths: list[str] = []
    improvements: list[str] = []
    points: list[str] = []
    for index, question in enumerate(answered, start=1):
        answer = question.answer or ""
        bucket = _bucket_for(answer)
        score = bucket.base + rng.random() * bucket.spread
        if bucket.strength:
            strengths.append(bucket.strength)
        if bucket.improvement:
            improvements.append(bucket.improvement)

        bonus = keyword_bonus(answer)
        if bonus:
            score += bonus
            strengths.append("Uses relevant technical terminology")

        points.append(f"Question {index}: {bucket.feedback}")
        total += score

    average = min(100, _round_half_up(total / len(answered)))
    completion_rate = _round_half_up(len(answered) / len(questions) * 100)

    lines = [
        "Interview Performance Report",
        "",
        f"Overall Score: {average}/100",
        f"Completion Rate: {completion_rate}%",
        f"Questions Answered: {len(answered)}/{len(questions)}",
        "",
    ]
    if strengths:
        lines += ["Strengths:", *(f"- {item}" for item in dict.fromkeys(strengths)), ""]
    if improvements:
        lines += ["Areas for Improvement:", *(f"- {item}" for item in dict.fromkeys(improvements)), ""]
    lines += ["Question-by-Question Feedback:", *points, ""]

    for threshold, heading, summary, list_title, items in _BANDS:
        if average >= threshold:
            lines += [heading, summary, "", f"{list_title}:", *(f"- {item}" for item in items)]
            break

    return InterviewEvaluation(feedback="\n".join(lines), score=average)


class ContentGateway:
    """Generates roadmaps, interviews, evaluations and assessments."""

    def __init__(
        self,
        llm: LLMService | None = None,
        *,
        rng: random.Random | None = None,
        use_environment: bool = True,
    ) -> None:
        """
        Args:
            llm: Completion service. When omitted and ``use_environment`` is
                set, one is built from the environment; if that fails every
                call uses the local templates.
            rng: Random source for the heuristic evaluation.
        """
        if llm is None and use_environment:
            try:
                llm = LLMService()
            except LLMError as exc:
                logger.info("Completion provider unavailable (%s); using local templates", exc)
        self.llm = llm
        self.rng = rng or random.Random()

    async def _request_json(self, prompt: str) -> dict[str, Any]:
        if self.llm is None:
            raise GenerationError("unavailable", "No completion provider configured")
        try:
            text = await self.llm.generate_llm_response(SYSTEM_INSTRUCTIONS, prompt)
        except Exception as exc:
            raise GenerationError(getattr(exc, "kind", "provider_error"), str(exc)) from exc
        try:
            return extract_json_object(text)
        except JSONExtractionError as exc:
            raise GenerationError("malformed_json", str(exc)) from exc

    async def _attempt(
        self, call_site: str, primary: Callable[[], Awaitable[T]]
    ) -> GenerationResult[T]:
        try:
            return GenerationResult(value=await primary())
        except GenerationError as exc:
            logger.warning("%s failed (%s): %s", call_site, exc.kind, exc)
            return GenerationResult(error=exc)

    async def try_generate_roadmap(
        self, skill: str, level: Difficulty, target_role: str
    ) -> GenerationResult[RoadmapDraft]:
        async def primary() -> RoadmapDraft:
            data = await self._request_json(roadmap_prompt(skill, level, target_role))
            return parse_roadmap(data, skill, level)

        return await self._attempt("Roadmap generation", primary)

    async def generate_roadmap(self, skill: str, level: Difficulty, target_role: str) -> RoadmapDraft:
        result = await self.try_generate_roadmap(skill, level, target_role)
        return result.unwrap_or_else(lambda _: templates.build_roadmap(skill, level, target_role))

    async def try_generate_mock_interview(
        self, role: str, experience: str
    ) -> GenerationResult[InterviewDraft]:
        async def primary() -> InterviewDraft:
            data = await self._request_json(interview_prompt(role, experience))
            return parse_interview(data, role)

        return await self._attempt("Interview generation", primary)

    async def generate_mock_interview(self, role: str, experience: str) -> InterviewDraft:
        result = await self.try_generate_mock_interview(role, experience)
        return result.unwrap_or_else(lambda _: templates.build_interview(role, experience))

    async def try_evaluate_interview(
        self, questions: list[InterviewQuestion]
    ) -> GenerationResult[InterviewEvaluation]:
        answered = [question for question in questions if question.is_answered]

        async def primary() -> InterviewEvaluation:
            data = await self._request_json(evaluation_prompt(answered))
            return parse_evaluation(data)

        return await self._attempt("Interview evaluation", primary)

    async def evaluate_interview(self, questions: list[InterviewQuestion]) -> InterviewEvaluation:
        if not any(question.is_answered for question in questions):
            return InterviewEvaluation(feedback=NO_ANSWERS_FEEDBACK, score=0)
        result = await self.try_evaluate_interview(questions)
        return result.unwrap_or_else(lambda _: heuristic_evaluation(questions, self.rng))

    async def try_generate_skill_assessment(
        self, skill: str
    ) -> GenerationResult[list[AssessmentQuestion]]:
        async def primary() -> list[AssessmentQuestion]:
            data = await self._request_json(assessment_prompt(skill))
            return parse_assessment(data)

        return await self._attempt("Skill assessment", primary)

    async def generate_skill_assessment(self, skill: str) -> list[AssessmentQuestion]:
        result = await self.try_generate_skill_assessment(skill)
        return result.unwrap_or_else(lambda _: templates.build_assessment(skill))

    async def test_connection(self) -> bool:
        """Round-trip a trivial prompt; True only if a JSON reply came back."""
        result = await self._attempt(
            "Connection test",
            lambda: self._request_json('Reply with the JSON object {"message": "Hello from SkillForge!"}'),
        )
        return result.ok
