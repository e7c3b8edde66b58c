"""
Holistic Assessment Prompt Builder

Renders a (mode-filtered) profile snapshot and a school into the single
prompt sent to the deep model. Output is deterministic for identical inputs.
"""

from typing import List

from ..logic.constants import ChancesMode, ItemStatus, ADVANCED_COURSE_LEVELS
from ..logic.contracts import ExtendedSchoolData
from ..snapshot.contracts import ProfileSnapshot
from .safety_rules import TIER_GUIDELINES, MODE_INSTRUCTIONS, format_safety_rules

RULE = "=" * 80
MAX_NOTABLE_COURSES = 10


def _banner(title: str) -> List[str]:
    return ["", RULE, title, RULE, ""]


def build_holistic_prompt(profile: ProfileSnapshot, school: ExtendedSchoolData, mode) -> str:
    """
    Constructs the holistic assessment prompt.
    The snapshot must already be filtered for `mode`.
    """
    mode = ChancesMode(mode)
    parts: List[str] = [
        f"You are an expert college admissions counselor with deep knowledge of {school.name}'s "
        "admission patterns, student body, institutional priorities, and what they look for in applicants.",
        "",
        "Your task is to provide a realistic, honest assessment of this student's chances of admission. "
        "Be neither overly optimistic nor pessimistic - aim for accuracy based on what you know about "
        "this school's admissions.",
    ]

    parts += _banner(f"TARGET SCHOOL: {school.name}")
    parts += _school_section(school)

    parts += _banner("STUDENT PROFILE")
    parts += _basics_section(profile)
    parts += _academics_section(profile)
    parts += _testing_section(profile)
    parts += _activities_section(profile)
    parts += _awards_section(profile)
    parts += _programs_section(profile)
    parts += _goals_section(profile, mode)

    parts += _banner("ASSESSMENT INSTRUCTIONS")
    parts += [
        f"Mode: {mode.value.upper()}. {MODE_INSTRUCTIONS[mode.value]}",
        "",
        f"Based on your knowledge of {school.name}'s admission patterns and what they value, "
        "provide a realistic assessment of this student's chances.",
        "",
        "Consider:",
        "- How this student compares to typically admitted students at this school",
        "- The school's specific priorities and culture",
        "- Academic competitiveness (GPA relative to course rigor, test scores)",
        "- Extracurricular depth, leadership, and distinctiveness",
        "- Any hooks or factors that might help or hurt",
        "",
        "Tier guidelines:",
    ]
    parts += [f"- **{name}** ({band}): {meaning}" for name, band, meaning in TIER_GUIDELINES]
    parts += ["", "SAFETY RULES (NON-NEGOTIABLE):", format_safety_rules()]

    return "\n".join(parts)


# =============================================================================
# SCHOOL
# =============================================================================

def _school_section(school: ExtendedSchoolData) -> List[str]:
    lines = ["## School Profile", ""]
    if school.city and school.state:
        lines.append(f"**Location:** {school.city}, {school.state}")
    if school.type:
        lines.append(f"**Type:** {school.type}")
    if school.undergrad_enrollment:
        lines.append(f"**Undergraduate Enrollment:** {school.undergrad_enrollment:,}")

    lines += ["", "### Admission Statistics"]
    if school.acceptance_rate:
        lines.append(f"- **Acceptance Rate:** {school.acceptance_rate * 100:.1f}%")
    else:
        lines.append("- **Acceptance Rate:** Unknown")
    if school.sat_range_25 and school.sat_range_75:
        lines.append(f"- **SAT Range (25th-75th percentile):** {school.sat_range_25} - {school.sat_range_75}")
    if school.act_range_25 and school.act_range_75:
        lines.append(f"- **ACT Range (25th-75th percentile):** {school.act_range_25} - {school.act_range_75}")
    if school.avg_gpa_unweighted:
        lines.append(f"- **Average GPA (Unweighted):** {school.avg_gpa_unweighted:.2f}")

    options = []
    if school.has_early_decision:
        options.append("Early Decision")
    if school.has_early_action:
        options.append("Early Action")
    if school.is_restrictive_early_action:
        options.append("Restrictive Early Action")
    if options:
        lines.append(f"- **Early Options:** {', '.join(options)}")

    if school.notes:
        lines += ["", "### What This School Values", school.notes]
    return lines


# =============================================================================
# STUDENT
# =============================================================================

def _basics_section(profile: ProfileSnapshot) -> List[str]:
    name = profile.first_name
    if profile.preferred_name:
        name += f" (goes by {profile.preferred_name})"
    lines = ["## Basic Information", "", f"**Name:** {name}", f"**Grade:** {profile.grade or 'Unknown'}"]
    if profile.graduation_year:
        lines.append(f"**Graduation Year:** {profile.graduation_year}")
    hs = profile.high_school
    if hs.name:
        location = ", ".join(p for p in (hs.city, hs.state) if p)
        lines.append(f"**High School:** {hs.name}" + (f" ({location})" if location else ""))
        if hs.type:
            lines.append(f"**School Type:** {hs.type}")
    return lines


def _academics_section(profile: ProfileSnapshot) -> List[str]:
    academics = profile.academics
    lines = ["", "## Academics", ""]

    if academics.gpa_unweighted is not None:
        scale = academics.gpa_scale or 4.0
        lines.append(f"- **GPA (Unweighted):** {academics.gpa_unweighted:.2f}/{scale:g}")
    else:
        lines.append("- **GPA (Unweighted):** Not provided")
    if academics.gpa_weighted is not None:
        lines.append(f"- **GPA (Weighted):** {academics.gpa_weighted:.2f}")

    if academics.class_rank and academics.class_size and academics.percentile is not None:
        lines.append(
            f"- **Class Rank:** {academics.class_rank} of {academics.class_size} "
            f"(top {100 - academics.percentile}%)"
        )

    if profile.counts.ap_courses:
        lines.append(f"- **AP/Advanced Courses:** {profile.counts.ap_courses}")

    notable = [c for c in profile.courses if c.level in ADVANCED_COURSE_LEVELS]
    if notable:
        lines += ["", "**Notable Courses:**"]
        for course in notable[:MAX_NOTABLE_COURSES]:
            grade = f" ({course.grade})" if course.grade else ""
            lines.append(f"- {course.name}{grade}")
    return lines


def _testing_section(profile: ProfileSnapshot) -> List[str]:
    testing = profile.testing
    lines = ["", "## Standardized Testing", ""]

    if testing.sat:
        lines += [
            f"- **SAT Total:** {testing.sat.total}",
            f"  - Math: {testing.sat.math}",
            f"  - Reading/Writing: {testing.sat.reading}",
        ]
    if testing.act:
        lines += [
            f"- **ACT Composite:** {testing.act.composite}",
            f"  - English: {testing.act.english}, Math: {testing.act.math}",
            f"  - Reading: {testing.act.reading}, Science: {testing.act.science}",
        ]
    if not testing.sat and not testing.act:
        lines.append("- No SAT/ACT scores on record")
    if testing.psat:
        lines.append(f"- **PSAT:** {testing.psat}")

    if testing.ap_scores:
        lines += ["", "**AP Exam Scores:**"]
        lines += [f"- {ap.subject}: {ap.score}" for ap in testing.ap_scores]
    return lines


def _status_marker(status: str) -> str:
    return "" if status == ItemStatus.ACTUAL.value else status.upper()


def _activities_section(profile: ProfileSnapshot) -> List[str]:
    lines = ["", "## Extracurricular Activities", ""]
    if not profile.activities:
        lines.append("No activities on record.")
        return lines

    counts = profile.counts
    lines += [
        f"Total: {counts.activities} activities ({counts.leadership_positions} leadership positions, "
        f"{counts.spike_activities} \"spike\" activities)",
        "",
    ]
    for index, activity in enumerate(profile.activities, start=1):
        markers = []
        if activity.is_leadership:
            markers.append("LEADERSHIP")
        if activity.is_spike:
            markers.append("SPIKE")
        if _status_marker(activity.status):
            markers.append(_status_marker(activity.status))
        marker_str = f" [{', '.join(markers)}]" if markers else ""
        org = f" - {activity.organization}" if activity.organization else ""
        lines.append(f"{index}. **{activity.title}**{org}{marker_str}")

        if activity.years_active:
            lines.append(f"   Years: {activity.years_active}")
        if activity.hours_per_week:
            lines.append(f"   Commitment: {activity.hours_per_week:g} hrs/week")
        if activity.description:
            lines.append(f"   {activity.description}")
        lines.append("")
    return lines


def _awards_section(profile: ProfileSnapshot) -> List[str]:
    lines = ["", "## Awards & Honors", ""]
    if not profile.awards:
        lines.append("No awards on record.")
        return lines

    lines += [
        f"Total: {profile.counts.awards} awards ({profile.counts.national_awards} national/international level)",
        "",
    ]
    for index, award in enumerate(profile.awards, start=1):
        marker = _status_marker(award.status)
        lines.append(f"{index}. **{award.title}**" + (f" [{marker}]" if marker else ""))
        detail = f"   Level: {award.level}"
        if award.organization:
            detail += f" | {award.organization}"
        if award.year:
            detail += f" | {award.year}"
        lines.append(detail)
    return lines


def _programs_section(profile: ProfileSnapshot) -> List[str]:
    if not profile.programs:
        return []
    lines = [
        "",
        "## Programs & Research",
        "",
        f"Total: {profile.counts.programs} programs ({profile.counts.selective_programs} selective)",
        "",
    ]
    for index, program in enumerate(profile.programs, start=1):
        marker = _status_marker(program.status)
        lines.append(f"{index}. **{program.name}**" + (f" [{marker}]" if marker else ""))
        if program.organization:
            lines.append(f"   Organization: {program.organization}")
        if program.selectivity:
            lines.append(f"   Selectivity: {program.selectivity}")
    return lines


def _goals_section(profile: ProfileSnapshot, mode: ChancesMode) -> List[str]:
    if mode == ChancesMode.CURRENT or not profile.goals:
        return []

    in_progress = [g for g in profile.goals if g.status == "in_progress"]
    planning = [g for g in profile.goals if g.status == "planning"] if mode == ChancesMode.SIMULATED else []
    if not in_progress and not planning:
        return []

    lines = [
        "",
        "## Goals & Trajectory",
        "",
        "*Consider these when assessing the student's trajectory and potential:*",
        "",
    ]
    if in_progress:
        lines.append("**Currently Working On:**")
        lines += [_goal_line(g) for g in in_progress]
    if planning:
        lines += ["", "**Planning:**"]
        lines += [_goal_line(g) for g in planning]
    return lines


def _goal_line(goal) -> str:
    return f"- {goal.title}: {goal.description}" if goal.description else f"- {goal.title}"
