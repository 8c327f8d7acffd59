"""Tone templates applied to the factual report text after analysis. Pure and deterministic."""

from typing import Dict, List

from resume_insight_ai.config import AVAILABLE_MOODS, DEFAULT_MOOD
from resume_insight_ai.schemas.analysis import AnalysisReport, MoodVariants

KINDS = ("summary", "strength", "improvement")

# mood -> kind -> templates; "{fact}" keeps its case, "{lower}" is lowercased.
# Strength/improvement variants rotate by item index.
MOOD_TEMPLATES: Dict[str, Dict[str, List[str]]] = {
    "professional": {
        "summary": [
            "Executive Summary: {fact} This assessment provides strategic recommendations for career advancement."
        ],
        "strength": ["Demonstrated competency: {lower}"],
        "improvement": ["Strategic recommendation: {lower}"],
    },
    "brutal": {
        "summary": ["Look, here's the deal: {lower} Time to face reality and fix what's broken."],
        "strength": [
            "Fine, you got this right: {lower}",
            "At least you didn't mess this up: {lower}",
            "This actually works: {lower}",
            "Credit where it's due: {lower}",
        ],
        "improvement": [
            "Stop ignoring this: {lower}",
            "This is holding you back: {lower}",
            "Fix this immediately: {lower}",
            "You're losing opportunities because of this: {lower}",
        ],
    },
    "soft": {
        "summary": ["You have wonderful potential! {fact} Keep believing in yourself!"],
        "strength": [
            "You're doing great with: {lower}",
            "It's lovely to see: {lower}",
            "You should be proud of: {lower}",
            "This really shines: {lower}",
        ],
        "improvement": [
            "With a little attention, consider: {lower}",
            "When you're ready, maybe try: {lower}",
            "A gentle suggestion: {lower}",
            "You might find it helpful to: {lower}",
        ],
    },
    "witty": {
        "summary": ["Well, well, well... {lower} Let's see what we're working with here!"],
        "strength": [
            "Not gonna lie, this is actually solid: {lower}",
            "Plot twist, you nailed this one: {lower}",
            "Okay, I'll give you this: {lower}",
            "Surprisingly decent: {lower}",
        ],
        "improvement": [
            "Hate to break it to you, but: {lower}",
            "Here's the tea: {lower}",
            "Reality check incoming: {lower}",
            "Plot armor won't save you from: {lower}",
        ],
    },
    "motivational": {
        "summary": ["CHAMPION! {fact} You're on the path to greatness!"],
        "strength": [
            "CRUSHING IT with: {lower}! Keep that energy!",
            "You're DOMINATING: {lower}! This is your superpower!",
            "BEAST MODE on: {lower}! Unstoppable!",
            "LEGENDARY work in: {lower}! You're built different!",
        ],
        "improvement": [
            "LEVEL UP opportunity: {lower}! You got this!",
            "NEXT CHALLENGE unlocked: {lower}! Time to shine!",
            "POWER UP available: {lower}! Claim your upgrade!",
            "BOSS BATTLE ahead: {lower}! Show them what you're made of!",
        ],
    },
}


def normalize_mood(mood: str) -> str:
    """Known mood name, or the default for anything unrecognized."""
    candidate = (mood or "").strip().lower()
    return candidate if candidate in AVAILABLE_MOODS else DEFAULT_MOOD


def apply_mood(fact: str, mood: str, kind: str = "summary", index: int = 0) -> str:
    """Render one factual sentence in the given tone. Same inputs, same output."""
    if kind not in KINDS:
        raise ValueError(f"Unknown text kind: {kind!r} (expected one of {', '.join(KINDS)})")
    fact = (fact or "").strip()
    if not fact:
        return ""
    templates = MOOD_TEMPLATES[normalize_mood(mood)][kind]
    template = templates[index % len(templates)]
    return template.format(fact=fact, lower=fact.lower())


def apply_mood_to_report(report: AnalysisReport, mood: str) -> AnalysisReport:
    """Copy of ``report`` with tone variants attached; scores and facts are left as they are."""
    mood = normalize_mood(mood)
    variants = MoodVariants(
        summary=apply_mood(report.summary, mood, "summary"),
        strengths=[apply_mood(s, mood, "strength", i) for i, s in enumerate(report.strengths)],
        improvements=[apply_mood(s, mood, "improvement", i) for i, s in enumerate(report.improvements)],
    )
    return report.model_copy(update={"mood": mood, "mood_variants": variants})
