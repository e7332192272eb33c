"""
Declarative descriptors for the structured output each feature expects.

A schema is an ordered set of required field names. The optional field
kind only shapes the example JSON shown to the model in the prompt; the
validator checks presence, never type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FieldKind(str, Enum):
    STRING = "string"
    STRING_ARRAY = "string-array"
    OBJECT_ARRAY = "object-array"
    ENUM = "enum"


@dataclass(frozen=True)
class Field:
    name: str
    kind: FieldKind | None = FieldKind.STRING
    choices: tuple[str, ...] = ()
    item_fields: tuple[str, ...] = ()
    # Verbatim JSON value used in the prompt instead of one derived from kind
    example: object = None


@dataclass(frozen=True)
class Schema:
    name: str
    label: str
    fields: tuple[Field, ...] = field(default_factory=tuple)

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


CHALLENGE = Schema(
    name="challenge",
    label="challenge",
    fields=(
        Field("title"),
        Field("difficulty", FieldKind.ENUM, choices=("Easy", "Medium", "Hard")),
        Field("description"),
        Field("requirements", FieldKind.STRING_ARRAY),
        Field("startingCode"),
        Field("hints", FieldKind.STRING_ARRAY),
        Field("testCases", FieldKind.OBJECT_ARRAY, item_fields=("input", "output")),
        Field("timeLimit"),
    ),
)

VISUALIZATION = Schema(
    name="visualization",
    label="visualization",
    fields=(
        Field("flowchart", example="mermaid flowchart syntax here"),
        Field("dependencies", example="mermaid dependency diagram syntax here"),
        Field("structure", example="mermaid folder structure syntax here"),
        Field("summary", example="brief description here"),
    ),
)

LEARNING_PATH = Schema(
    name="learning_path",
    label="learning path",
    fields=(
        Field(
            "currentLevel",
            FieldKind.ENUM,
            choices=("beginner", "intermediate", "advanced"),
        ),
        Field("recommendedTechnologies", FieldKind.STRING_ARRAY),
        Field(
            "learningPath",
            None,
            example={
                "beginner": ["step1", "step2"],
                "intermediate": ["step1", "step2"],
                "advanced": ["step1", "step2"],
            },
        ),
        Field(
            "resources",
            FieldKind.OBJECT_ARRAY,
            example=[
                {
                    "title": "Resource name",
                    "url": "valid URL",
                    "type": "documentation or course or tutorial",
                }
            ],
        ),
        Field(
            "estimatedTimeframes",
            None,
            example={
                "beginner": "timeframe",
                "intermediate": "timeframe",
                "advanced": "timeframe",
            },
        ),
    ),
)

RESUME = Schema(
    name="resume",
    label="resume",
    fields=(
        Field("professionalSummary"),
        Field("technicalSkills", FieldKind.STRING_ARRAY),
        Field(
            "projectHighlights",
            FieldKind.OBJECT_ARRAY,
            item_fields=("name", "description"),
        ),
        Field("contributionsAndAchievements", FieldKind.STRING_ARRAY),
        Field("recommendations"),
    ),
)
