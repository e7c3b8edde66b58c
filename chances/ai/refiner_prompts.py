"""
Prompts for the legacy quantitative + LLM refiner.
"""

from ..logic.constants import ChancesMode
from ..logic.contracts import SchoolData, QuantitativeResult
from ..snapshot.contracts import ProfileSnapshot
from .safety_rules import (
    COUNSELOR_ROLE_DEFINITION,
    REFINER_TASKS,
    REFINER_JSON_OUTPUT_FORMAT,
    MODE_INSTRUCTIONS,
    format_safety_rules,
)


def build_refiner_system_prompt() -> str:
    """Constructs the static system prompt."""
    return f"""{COUNSELOR_ROLE_DEFINITION}

{REFINER_TASKS}

SAFETY RULES (NON-NEGOTIABLE):
{format_safety_rules()}

{REFINER_JSON_OUTPUT_FORMAT}"""


ASSESSMENT_SYSTEM_PROMPT = build_refiner_system_prompt()


def build_refiner_prompt(
    profile: ProfileSnapshot,
    school: SchoolData,
    mode,
    quantitative: QuantitativeResult,
) -> str:
    mode = ChancesMode(mode)
    return f"""
## Student Profile

{build_student_summary(profile, mode)}

## Target School

{build_school_summary(school)}

## Quantitative Assessment (Already Calculated)

{build_quantitative_context(quantitative)}

## Your Task

Based on the student's activities, awards, goals, and overall profile:

1. Score their ACTIVITIES (0-100) and assess impact
2. Score their AWARDS (0-100) and assess impact
3. Determine if you need to ADJUST the base probability (within -20 to +20)
4. Write a helpful SUMMARY explaining their chances
5. Suggest 2-4 IMPROVEMENTS that could help

Mode: {mode.value.upper()}
{MODE_INSTRUCTIONS[mode.value]}

Respond ONLY with the JSON format specified."""


def build_student_summary(profile: ProfileSnapshot, mode) -> str:
    mode = ChancesMode(mode)
    parts = [f"**{profile.display_name}**, {profile.grade or 'unknown grade'}"]
    if profile.high_school.name:
        parts.append(f"at {profile.high_school.name} ({profile.high_school.type or 'unknown type'})")

    academics = profile.academics
    if academics.gpa_unweighted:
        line = f"GPA: {academics.gpa_unweighted}"
        if academics.class_rank and academics.class_size:
            line += f" (rank {academics.class_rank}/{academics.class_size})"
        parts.append(line)

    if profile.testing.sat:
        sat = profile.testing.sat
        parts.append(f"SAT: {sat.total} ({sat.math}M/{sat.reading}RW)")
    if profile.testing.act:
        parts.append(f"ACT: {profile.testing.act.composite}")

    if profile.activities:
        items = []
        for a in profile.activities[:5]:
            text = f"{a.title} at {a.organization}" if a.organization else a.title
            if a.is_leadership:
                text += " [LEADERSHIP]"
            if a.is_spike:
                text += " [SPIKE]"
            items.append(text)
        parts.append(
            f"\nActivities ({profile.counts.activities} total, "
            f"{profile.counts.leadership_positions} leadership):\n- " + "\n- ".join(items)
        )

    if profile.awards:
        items = [f"{a.title} ({a.level})" for a in profile.awards[:5]]
        parts.append(
            f"\nAwards ({profile.counts.awards} total, {profile.counts.national_awards} national+):\n- "
            + "\n- ".join(items)
        )

    if profile.programs:
        items = [f"{p.name} [{p.selectivity}]" if p.selectivity else p.name for p in profile.programs[:3]]
        parts.append("\nPrograms:\n- " + "\n- ".join(items))

    if mode != ChancesMode.CURRENT and profile.goals:
        in_progress = [g for g in profile.goals if g.status == "in_progress"]
        if in_progress:
            items = [
                f"{g.title} ({g.category}) - {g.tasks_completed}/{g.tasks_total} tasks done"
                for g in in_progress
            ]
            parts.append("\nIn Progress Goals:\n- " + "\n- ".join(items))

        planning = [g for g in profile.goals if g.status == "planning"]
        if planning and mode == ChancesMode.SIMULATED:
            parts.append("\nPlanned Goals:\n- " + "\n- ".join(g.title for g in planning))

    return "\n".join(parts)


def build_school_summary(school: SchoolData) -> str:
    parts = [f"**{school.name}**"]
    if school.acceptance_rate:
        parts.append(f"Acceptance Rate: {school.acceptance_rate * 100:.1f}%")
    if school.sat_range_25 and school.sat_range_75:
        parts.append(f"SAT Range: {school.sat_range_25}-{school.sat_range_75}")
    if school.act_range_25 and school.act_range_75:
        parts.append(f"ACT Range: {school.act_range_25}-{school.act_range_75}")
    if school.avg_gpa_unweighted:
        parts.append(f"Average GPA: {school.avg_gpa_unweighted}")
    return "\n".join(parts)


def build_quantitative_context(result: QuantitativeResult) -> str:
    f = result.factors
    return f"""Base Probability: {result.base_probability}%

Academics: {f.academics.score}/100 ({f.academics.impact})
- {f.academics.details}

Testing: {f.testing.score}/100 ({f.testing.impact})
- {f.testing.details}

Acceptance Rate Factor: {f.acceptance_rate.score}/100 ({f.acceptance_rate.impact})
- {f.acceptance_rate.details}

Confidence: {result.confidence} - {result.confidence_reason}"""
