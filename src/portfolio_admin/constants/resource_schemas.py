"""Field schemas and card adapters for every managed resource kind."""

from __future__ import annotations

from typing import Any

from portfolio_admin.models.cards import CardContent
from portfolio_admin.models.schema import FieldSpec, InputKind, ResourceSchema, Transport
from portfolio_admin.utils.display import format_timestamp, preview_text


def _text(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def _str_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def skill_card(record: dict[str, Any]) -> CardContent:
    return CardContent(
        title=_text(record, "name"),
        lines=[f"Level: {record.get('level') or 0}%"],
        badges=[_text(record, "category")],
    )


def project_card(record: dict[str, Any]) -> CardContent:
    return CardContent(
        title=_text(record, "title"),
        lines=[_text(record, "description")],
        badges=_str_list(record.get("techStack")),
    )


def experience_card(record: dict[str, Any]) -> CardContent:
    location = _text(record, "location")
    where = f"**{_text(record, 'company')}**" + (f" - {location}" if location else "")
    end = "Present" if record.get("current") else _text(record, "endDate")
    return CardContent(
        title=_text(record, "title"),
        lines=[where, _text(record, "description")],
        badges=[f"{_text(record, 'startDate')} - {end}"],
    )


def blog_card(record: dict[str, Any]) -> CardContent:
    return CardContent(
        title=_text(record, "title"),
        lines=[_text(record, "excerpt")],
        badges=[*_str_list(record.get("tags")), _text(record, "date")],
    )


def education_card(record: dict[str, Any]) -> CardContent:
    field_of_study = _text(record, "field")
    location = _text(record, "location")
    end = _text(record, "endDate")
    return CardContent(
        title=_text(record, "degree") + (f" - {field_of_study}" if field_of_study else ""),
        lines=[
            f"**{_text(record, 'institution')}**" + (f" • {location}" if location else ""),
            _text(record, "description"),
        ],
        badges=[_text(record, "startDate") + (f" - {end}" if end else "")],
    )


def message_card(record: dict[str, Any], timezone: str = "Asia/Kolkata") -> CardContent:
    return CardContent(
        title=_text(record, "subject") or "No subject",
        lines=[
            f"**{_text(record, 'name')}** • {_text(record, 'email')}",
            preview_text(record.get("message")),
        ],
        badges=[
            "Read" if record.get("read") else "New",
            format_timestamp(record.get("createdAt"), timezone),
        ],
    )


def _clear_end_date_when_current(payload: dict[str, Any]) -> dict[str, Any]:
    # Ongoing roles have no end date, whatever was typed.
    if payload.get("current"):
        payload["endDate"] = ""
    return payload


SKILLS = ResourceSchema(
    kind="skills",
    title="Skill",
    noun="skill",
    fields=(
        FieldSpec("name", "Skill Name", required=True),
        FieldSpec("category", "Category", required=True),
        FieldSpec("level", "Level (%)", InputKind.NUMBER, required=True),
    ),
    card=skill_card,
)

PROJECTS = ResourceSchema(
    kind="projects",
    title="Project",
    noun="project",
    fields=(
        FieldSpec("title", "Project Title", required=True),
        FieldSpec("description", "Description", InputKind.TEXTAREA, required=True),
        FieldSpec("techStack", "Tech Stack (comma-separated)", required=True, array=True),
        FieldSpec("date", "Date", InputKind.MONTH, required=True),
    ),
    card=project_card,
    transport=Transport.MULTIPART,
)

EXPERIENCE = ResourceSchema(
    kind="experience",
    title="Experience",
    noun="experience entry",
    fields=(
        FieldSpec("title", "Job Title", required=True),
        FieldSpec("company", "Company", required=True),
        FieldSpec("location", "Location", required=True),
        FieldSpec("startDate", "Start Date", InputKind.MONTH, required=True),
        FieldSpec("endDate", "End Date", InputKind.MONTH),
        FieldSpec("current", "Currently Working Here", InputKind.CHECKBOX),
        FieldSpec("description", "Description", InputKind.TEXTAREA),
        FieldSpec("achievements", "Achievements (comma-separated)", array=True),
    ),
    card=experience_card,
    json_encoded_arrays=True,
    normalize=_clear_end_date_when_current,
)

BLOGS = ResourceSchema(
    kind="blogs",
    title="Blog",
    noun="blog post",
    fields=(
        FieldSpec("title", "Title", required=True),
        FieldSpec("excerpt", "Excerpt"),
        FieldSpec("content", "Content", InputKind.TEXTAREA, required=True),
        FieldSpec("date", "Date", InputKind.DATE),
        FieldSpec("tags", "Tags (comma-separated)", array=True),
        FieldSpec("image", "Image", InputKind.FILE),
    ),
    card=blog_card,
    transport=Transport.MULTIPART,
    create_title="Add Blog",
)

EDUCATION = ResourceSchema(
    kind="education",
    title="Education",
    noun="education entry",
    fields=(
        FieldSpec("institution", "Institution", required=True),
        FieldSpec("degree", "Degree", required=True),
        FieldSpec("field", "Field"),
        FieldSpec("location", "Location"),
        FieldSpec("startDate", "Start Date", InputKind.MONTH, required=True),
        FieldSpec("endDate", "End Date", InputKind.MONTH),
        FieldSpec("description", "Description", InputKind.TEXTAREA),
    ),
    card=education_card,
    create_label="Add",
    update_label="Update",
    create_title="Add Education",
)

MESSAGES = ResourceSchema(
    kind="messages",
    title="Message",
    noun="message",
    fields=(),
    card=message_card,
)

# Kinds with a create/edit form, in sidebar order
EDITABLE_SCHEMAS: tuple[ResourceSchema, ...] = (SKILLS, PROJECTS, EXPERIENCE, BLOGS, EDUCATION)

# Collections counted on the dashboard
COUNTED_KINDS: tuple[str, ...] = (
    "skills",
    "projects",
    "experience",
    "blogs",
    "education",
    "messages",
)

PROFILE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("name", "Name"),
    FieldSpec("role", "Role"),
    FieldSpec("bio", "Bio", InputKind.TEXTAREA),
    FieldSpec("email", "Email"),
    FieldSpec("phone", "Phone"),
    FieldSpec("location", "Location"),
    FieldSpec("github", "GitHub"),
    FieldSpec("linkedin", "LinkedIn"),
)
