"""Skill-gap recommendations comparing a user's skill levels against demand."""

from typing import Mapping

from salary_explorer.domain.models import SKILLS, Skill

from .models import GapStatus, SkillGap, SkillGapReport


def skill_gaps(
    user_levels: Mapping[Skill, float],
    frequency: Mapping[Skill, float],
    threshold: float = 0.05,
    limit: int = 3,
) -> SkillGapReport:
    """Compare user skill levels (0..1) with the skill frequency of a subset.

    Only skills with some demand are considered. Gaps larger than ``threshold``
    are reported biggest first, at most ``limit`` of them. When no gap exceeds
    the threshold the report says whether every skill is met (MEETS) or some
    fall short by a small margin (CLOSE).
    """
    demanded = [
        SkillGap(
            skill=skill,
            demand=frequency.get(skill, 0.0),
            user_level=min(max(user_levels.get(skill, 0.0), 0.0), 1.0),
        )
        for skill in SKILLS
        if frequency.get(skill, 0.0) > 0
    ]
    if not demanded:
        return SkillGapReport(status=GapStatus.NO_DATA)

    large = sorted((gap for gap in demanded if gap.gap > threshold), key=lambda gap: -gap.gap)
    if large:
        return SkillGapReport(status=GapStatus.GAPS, gaps=tuple(large[:limit]))

    unmet = tuple(gap for gap in demanded if gap.user_level < gap.demand)
    if not unmet:
        return SkillGapReport(status=GapStatus.MEETS)
    return SkillGapReport(status=GapStatus.CLOSE, minor_gaps=unmet)
