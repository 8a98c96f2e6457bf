"""
Introduction template parsing.

Members introduce themselves with five labelled lines::

    🎓 Name: Ada
    💼 Role / Study: CS undergrad
    🤖 Interests: LLM agents
    🧠 Skills: Python, PyTorch
    🚀 Goal: ship a hackathon project

Each field is matched against its own line only, so a label quoted inside
another field's value (``Goal: learn new Skills: fast``) never satisfies a
different field. The first matching line wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Dict, List


@dataclass(frozen=True)
class TemplateField:
    emoji: str
    name: str

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}"


REQUIRED_FIELDS: tuple[TemplateField, ...] = (
    TemplateField("🎓", "Name"),
    TemplateField("💼", "Role / Study"),
    TemplateField("🤖", "Interests"),
    TemplateField("🧠", "Skills"),
    TemplateField("🚀", "Goal"),
)

FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in REQUIRED_FIELDS)

TEMPLATE_HINT = "\n".join(f"{f.label}:" for f in REQUIRED_FIELDS)


def _field_pattern(tf: TemplateField) -> re.Pattern[str]:
    # Anchored at line start: optional glyph (plus variation selector), label, colon, value.
    name = r"[ \t]*".join(re.escape(part) for part in tf.name.split(" "))
    return re.compile(
        rf"^[ \t]*(?:{re.escape(tf.emoji)}\ufe0f?[ \t]*)?{name}[ \t]*:[ \t]*(?P<value>[^\n]*)$",
        re.IGNORECASE | re.MULTILINE,
    )


_PATTERNS: dict[str, re.Pattern[str]] = {f.name: _field_pattern(f) for f in REQUIRED_FIELDS}


@dataclass(frozen=True)
class TemplateResult:
    is_valid: bool
    fields: Dict[str, str] = field(default_factory=dict)
    missing_fields: List[str] = field(default_factory=list)


def validate(text: str) -> TemplateResult:
    """
    Parse ``text`` against the five required fields.

    :param text: Raw introduction text.
    :returns: Present fields (trimmed, non-empty) and missing names in
        template order. ``is_valid`` is true only when nothing is missing.
    """
    content = (text or "").strip()
    fields: Dict[str, str] = {}
    missing: List[str] = []

    for tf in REQUIRED_FIELDS:
        match = _PATTERNS[tf.name].search(content)
        value = match.group("value").strip() if match else ""
        if value:
            fields[tf.name] = value
        else:
            missing.append(tf.name)

    return TemplateResult(is_valid=not missing, fields=fields, missing_fields=missing)


_INLINE_LABEL_RE = re.compile(
    "[ \\t]*(?P<label>(?:"
    + "|".join(re.escape(f.emoji) for f in REQUIRED_FIELDS)
    + ")\\ufe0f?[ \\t]*(?:"
    + "|".join(r"[ \t]*".join(re.escape(p) for p in f.name.split(" ")) for f in REQUIRED_FIELDS)
    + ")[ \\t]*:)",
    re.IGNORECASE,
)


def unfold_inline(text: str) -> str:
    """
    Put every glyph-prefixed label on its own line.

    Slash command options cannot contain newlines, so ``/updateintro`` input
    arrives as ``🎓 Name: Ada 💼 Role / Study: ...`` on a single line. Only
    labels carrying their glyph are split out; bare words are left alone.
    """
    source = text or ""

    def _split(m: re.Match[str]) -> str:
        if m.start() == 0 or source[m.start() - 1] == "\n":
            return m.group(0)
        return "\n" + m.group("label")

    return _INLINE_LABEL_RE.sub(_split, source).strip()


def incomplete_notice(missing: List[str], *, lead: str = "Your introduction seems incomplete.") -> str:
    """User-facing correction listing ``missing`` fields and the template."""
    return (
        f"⚠️ {lead}\n"
        f"Missing fields: **{', '.join(missing)}**\n\n"
        "Please resend your intro in this format:\n\n"
        f"{TEMPLATE_HINT}"
    )


__all__ = [
    "REQUIRED_FIELDS",
    "FIELD_NAMES",
    "TEMPLATE_HINT",
    "TemplateField",
    "TemplateResult",
    "validate",
    "unfold_inline",
    "incomplete_notice",
]
