"""
Prompt assembly for every generator.

Structured prompts share one template: task, context lines, the JSON-only
instruction and a JSON shape rendered from the feature's ``Schema``.
Free-text prompts (documentation, chat, solutions, translation) are plain
templates. All builders are deterministic for identical inputs.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from tools_hub import schemas
from tools_hub.schemas import Field, FieldKind, Schema

JSON_ONLY_INSTRUCTION = (
    "Return ONLY a JSON object without any extra text, markdown formatting, "
    "or code block syntax. The JSON must have this exact structure:"
)

DOCUMENTATION_SECTIONS = (
    "Repository Overview",
    "Code Quality Analysis",
    "Repository Insights",
    "Dependency Analysis",
    "Language Distribution",
    "File Structure",
    "Setup Instructions",
    "Usage Examples",
)


# ── Shape rendering ────────────────────────────────────────────
def _example_value(f: Field) -> Any:
    if f.example is not None:
        return f.example
    if f.kind is FieldKind.STRING_ARRAY:
        return ["string"]
    if f.kind is FieldKind.OBJECT_ARRAY:
        return [{name: "string" for name in f.item_fields}]
    if f.kind is FieldKind.ENUM:
        return " or ".join(f.choices)
    return "string"


def render_shape(schema: Schema) -> str:
    """Example JSON object listing every required field in schema order."""
    return json.dumps({f.name: _example_value(f) for f in schema.fields}, indent=2)


def join(values: Iterable[Any]) -> str:
    return ", ".join(str(v) for v in values)


def build_structured_prompt(
    task: str,
    schema: Schema,
    context: Iterable[str] = (),
    closing: str | None = None,
) -> str:
    """Prompt asking for a JSON object shaped like *schema*."""
    parts = [task, *context, "", JSON_ONLY_INSTRUCTION, "", render_shape(schema)]
    if closing:
        parts += ["", closing]
    return "\n".join(parts)


def render_transcript(messages: Iterable[dict[str, str]]) -> str:
    """``role: content`` lines in chronological order."""
    return "\n".join(f"{m['role']}: {m['content']}" for m in messages)


# ── Structured feature prompts ─────────────────────────────────
def challenge_prompt(stack: dict[str, Any]) -> str:
    return build_structured_prompt(
        "Based on this GitHub profile, create a coding challenge:",
        schemas.CHALLENGE,
        context=[
            f"Languages: {join(stack['languages'])}",
            f"Technologies: {join(stack['technologies'])}",
            f"Repository count: {stack['repoCount']}",
        ],
        closing="Make it match their skill level.",
    )


def learning_path_prompt(stack: dict[str, Any]) -> str:
    return build_structured_prompt(
        "Based on this GitHub user's technology stack, create a personalized learning path.",
        schemas.LEARNING_PATH,
        context=[
            f"The user works with these languages: {join(stack['languages'])}",
            f"And these technologies: {join(stack['technologies'])}",
        ],
    )


def resume_prompt(profile: dict[str, Any]) -> str:
    return build_structured_prompt(
        "Create a professional resume using this GitHub profile data.",
        schemas.RESUME,
        context=[
            f"Name: {profile['name']}",
            f"Bio: {profile['bio'] or 'Not provided'}",
            f"Repositories: {json.dumps(profile['repositories'])}",
            f"Languages: {join(profile['languages'])}",
            f"Public repositories: {profile['publicRepos']}",
            f"Followers: {profile['followers']}",
        ],
    )


def visualization_prompt(structure: dict[str, Any]) -> str:
    return build_structured_prompt(
        "Analyze this repository structure and create Mermaid visualizations.",
        schemas.VISUALIZATION,
        context=[
            f"Repository: {structure['path']}",
            "",
            f"Files: {json.dumps(structure['files'])}",
            f"Dependencies: {json.dumps(structure['dependencies'])}",
        ],
        closing="Do not include any explanations or additional text, just the JSON object.",
    )


# ── Free-text prompts ──────────────────────────────────────────
def documentation_prompt(analytics: dict[str, Any]) -> str:
    sections = "\n".join(
        f"{i}. {title}" for i, title in enumerate(DOCUMENTATION_SECTIONS, start=1)
    )
    return (
        "Generate comprehensive documentation for this GitHub repository:\n\n"
        f"Repository Analysis:\n{json.dumps(analytics, indent=2)}\n\n"
        f"Please include:\n{sections}"
    )


def solution_prompt(challenge: dict[str, Any]) -> str:
    requirements = "\n".join(str(r) for r in challenge.get("requirements") or [])
    test_cases = "\n".join(
        f"Input: {tc.get('input')}\nOutput: {tc.get('output')}"
        for tc in challenge.get("testCases") or []
        if isinstance(tc, dict)
    )
    return (
        "Provide a solution to this coding challenge:\n\n"
        f"{challenge.get('description', '')}\n\n"
        f"Requirements:\n{requirements}\n\n"
        f"Test Cases:\n{test_cases}\n\n"
        "Provide only the solution code with comments explaining the approach."
    )


def chat_prompt(
    context: dict[str, Any], messages: list[dict[str, str]], question: str
) -> str:
    name = context["name"]
    return (
        f'You are a helpful AI assistant for the GitHub repository "{name}".\n'
        "Repository context:\n"
        f"Name: {name}\n"
        f"Description: {context.get('description')}\n"
        f"Languages: {join(context.get('languages') or {})}\n"
        f"Recent commits: {json.dumps(context.get('lastCommits') or [])}\n\n"
        f"Previous messages: {render_transcript(messages)}\n\n"
        f"User's question: {question}\n\n"
        "Provide a concise and helpful response based on the repository context. "
        "Focus on technical details and be specific."
    )


def translation_prompt(source_code: str, from_lang: str, to_lang: str) -> str:
    return (
        f"Translate this {from_lang} code to {to_lang}. Return ONLY the translated "
        f"code without any explanations or markdown:\n\n{source_code}"
    )


def welcome_message(context: dict[str, Any]) -> str:
    return (
        f'I\'ve analyzed the repository "{context["name"]}". '
        "You can ask me questions about:\n\n"
        f"• Code structure and languages ({join(context.get('languages') or {})})\n"
        "• Recent commits and changes\n"
        "• Project dependencies and setup\n\n"
        "What would you like to know?"
    )
