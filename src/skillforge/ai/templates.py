"""Local template generators used when the completion provider is unavailable.

Everything here is deterministic and offline. Every roadmap step gets at
least one resource and every generated collection is non-empty.
"""

from __future__ import annotations

import re

from skillforge.models import (
    AssessmentQuestion,
    InterviewDraft,
    InterviewQuestion,
    Resource,
    RoadmapDraft,
    RoadmapStep,
)
from skillforge.models.entities import Difficulty

# (title, description, estimated time) per step, keyed by lower-cased skill then level.
ROADMAP_TEMPLATES: dict[str, dict[str, list[tuple[str, str, str]]]] = {
    "react": {
        "beginner": [
            ("JavaScript Fundamentals", "Master ES6+ features, async/await, and DOM manipulation", "2 weeks"),
            ("React Basics", "Components, JSX, props, and state management", "2 weeks"),
            ("React Hooks", "useState, useEffect, and custom hooks", "1 week"),
            ("State Management", "Context API and basic state patterns", "1 week"),
            ("Routing", "React Router for navigation", "1 week"),
            ("Build a Project", "Create a complete React application", "2 weeks"),
        ],
        "intermediate": [
            ("Advanced Hooks", "useReducer, useMemo, useCallback, and custom hooks", "1 week"),
            ("Performance Optimization", "React.memo, lazy loading, and code splitting", "1 week"),
            ("Testing", "Jest, React Testing Library, and component testing", "2 weeks"),
            ("State Management Libraries", "Redux Toolkit or Zustand", "2 weeks"),
            ("TypeScript Integration", "Type-safe React development", "1 week"),
            ("Advanced Project", "Build a complex application with best practices", "3 weeks"),
        ],
        "advanced": [
            ("React Internals", "Fiber architecture, reconciliation, and rendering", "2 weeks"),
            ("Custom Hooks Library", "Build reusable hook patterns", "1 week"),
            ("Micro-frontends", "Module federation and micro-frontend architecture", "2 weeks"),
            ("Server-Side Rendering", "Next.js and SSR optimization", "2 weeks"),
            ("React Native", "Cross-platform mobile development", "3 weeks"),
            ("Open Source Contribution", "Contribute to React ecosystem projects", "4 weeks"),
        ],
    },
}

# Skill-agnostic path; ``{skill}`` is substituted.
GENERIC_ROADMAP: list[tuple[str, str, str]] = [
    ("{skill} Fundamentals", "Start with the core concepts and syntax of {skill}.", "2 weeks"),
    ("{skill} Tooling", "Set up the standard tools, editors and workflows used with {skill}.", "1 week"),
    ("Core {skill} Patterns", "Study the idioms and patterns experienced {skill} developers rely on.", "2 weeks"),
    ("Build a Small {skill} Project", "Apply your knowledge by building a simple project with {skill}.", "3 weeks"),
]

# (title, type, url) per topic.
RESOURCE_CATALOGUE: dict[str, list[tuple[str, str, str]]] = {
    "JavaScript Fundamentals": [
        ("MDN JavaScript Guide", "article", "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Guide"),
        ("JavaScript.info", "course", "https://javascript.info/"),
        ("You Don't Know JS", "book", "https://github.com/getify/You-Dont-Know-JS"),
    ],
    "React Basics": [
        ("React Official Tutorial", "course", "https://react.dev/learn"),
        ("React Crash Course", "video", "https://www.youtube.com/watch?v=w7ejDZ8SWv8"),
        ("React Exercises", "practice", "https://react-exercises.com/"),
    ],
}

INTERVIEW_TEMPLATES: dict[str, dict[str, list[str]]] = {
    "frontend developer": {
        "junior": [
            "What is the difference between let, const, and var in JavaScript?",
            "Explain the concept of closures in JavaScript.",
            "What are React hooks and why are they useful?",
            "How do you handle state management in React?",
            "What is the difference between CSS Grid and Flexbox?",
        ],
        "mid": [
            "Explain the virtual DOM and how React uses it.",
            "What are the different ways to optimize React performance?",
            "How would you implement authentication in a React application?",
            "Describe your approach to responsive web design.",
            "What testing strategies do you use for frontend applications?",
        ],
        "senior": [
            "How would you architect a large-scale React application?",
            "Explain micro-frontends and when you would use them.",
            "How do you ensure accessibility in web applications?",
            "Describe your approach to code review and mentoring.",
            "How would you handle performance optimization for a high-traffic website?",
        ],
    },
}

GENERIC_INTERVIEW: list[str] = [
    "Tell me about your experience as a {role}.",
    "Describe a challenging problem you've solved recently in a {role} context.",
    "How do you stay updated with the latest trends in {role} development?",
    "What are your strengths and weaknesses as a {role}?",
    "Do you have any questions for us about the {role} position?",
]

_LEADING_NUMBER_RE = re.compile(r"\d+")


def _weeks(estimated_time: str) -> int:
    match = _LEADING_NUMBER_RE.search(estimated_time)
    return int(match.group()) if match else 0


def resources_for(topic: str) -> list[Resource]:
    """Return the catalogued resources for ``topic``, or generic placeholders."""
    entries = RESOURCE_CATALOGUE.get(topic) or [
        (f"{topic} Documentation", "article", "#"),
        (f"{topic} Tutorial", "video", "#"),
        (f"{topic} Practice", "practice", "#"),
    ]
    return [
        Resource(id=f"resource-{index}", title=title, type=kind, url=url)
        for index, (title, kind, url) in enumerate(entries, start=1)
    ]


def build_roadmap(skill: str, level: Difficulty, target_role: str) -> RoadmapDraft:
    template = ROADMAP_TEMPLATES.get(skill.strip().lower(), {}).get(level)
    if template is None:
        template = [
            (title.format(skill=skill), description.format(skill=skill), time)
            for title, description, time in GENERIC_ROADMAP
        ]

    steps = [
        RoadmapStep(
            id=f"step-{index}",
            title=title,
            description=description,
            resources=resources_for(title),
            estimated_time=time,
            order=index,
        )
        for index, (title, description, time) in enumerate(template, start=1)
    ]
    total_weeks = sum(_weeks(time) for _, _, time in template)

    return RoadmapDraft(
        title=f"{skill} {level.capitalize()} to {target_role}",
        description=f"Comprehensive learning path to master {skill} and become a {target_role}",
        skill=skill,
        steps=steps,
        estimated_duration=f"{total_weeks} weeks",
        difficulty=level,
    )


def experience_bucket(experience: str) -> str:
    """Map a free-text experience level to ``junior``, ``mid`` or ``senior``."""
    lowered = experience.lower()
    if "senior" in lowered:
        return "senior"
    if "mid" in lowered or "intermediate" in lowered:
        return "mid"
    return "junior"


def build_interview(role: str, experience: str) -> InterviewDraft:
    by_level = INTERVIEW_TEMPLATES.get(role.strip().lower())
    if by_level is not None:
        texts = by_level[experience_bucket(experience)]
    else:
        texts = [text.format(role=role) for text in GENERIC_INTERVIEW]

    questions = [
        InterviewQuestion(id=f"question-{index}", question=text)
        for index, text in enumerate(texts, start=1)
    ]
    return InterviewDraft(role=role, questions=questions)


def build_assessment(skill: str) -> list[AssessmentQuestion]:
    return [
        AssessmentQuestion(
            question=f"What is a fundamental concept in {skill}?",
            options=["Concept A", "Concept B", "Concept C", "Concept D"],
            correct_answer=0,
            explanation=f"Concept A is a core building block of {skill}.",
        ),
        AssessmentQuestion(
            question=f"Which tool is commonly used with {skill}?",
            options=["Tool X", "Tool Y", "Tool Z", "None of the above"],
            correct_answer=1,
            explanation=f"Tool Y is widely adopted in the {skill} ecosystem.",
        ),
    ]
