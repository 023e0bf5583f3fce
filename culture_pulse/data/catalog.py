"""Label catalogs for the survey's quick picks, tags and rating questions"""

from typing import Dict, Optional

# Wins
QUICK_PICKS: Dict[str, str] = {
    'learning': 'Learned something new',
    'helped': 'Helped someone else level up',
    'simplified': 'Simplified or improved how we work',
    'decision': 'Made or backed a tough call',
    'impact': 'Delivered real impact',
    'other': 'Something else entirely',
}

# Blockers
BLOCKER_TAGS: Dict[str, str] = {
    'process': 'Process',
    'tools': 'Tools or access',
    'dependencies': 'Dependencies on others',
    'decisions': 'Slow or unclear decisions',
    'scope': 'Scope changing mid-stream',
    'other': 'Other',
}

# Challenge areas picked per blocking teammate
BLOCKER_FEEDBACK_TAGS: Dict[str, str] = {
    'ownership': 'Ownership & accountability',
    'reliability': 'Reliability & follow-through',
    'responsiveness': 'Responsiveness & availability',
    'communication': 'Communication clarity & tone',
    'context': 'Context & documentation',
    'handoffs': 'Handoffs & collaboration',
    'meetings': 'Meeting hygiene',
    'process': 'Process discipline',
    'skills': 'Skill & knowledge readiness',
    'respect': 'Respect, credit & psychological safety',
}

# Shoutouts
IMPACT_TAGS: Dict[str, str] = {
    'unblocked': 'Unblocked me',
    'context': 'Shared context',
    'clarity': 'Gave clarity',
    'ownership': 'Took ownership',
    'forward': 'Moved things forward',
    'standard': 'Set the standard',
    'bar': 'Raised the bar',
    'example': 'Led by example',
}

CULTURE_PULSE_QUESTIONS: Dict[str, str] = {
    'focus': 'Focused on What Matters',
    'clarity': 'Clarity & Guidance',
    'safety': 'Psychological Safety',
    'sustainability': 'Pace & Sustainability',
    'energy': 'Energy & Enjoyment',
    'growth': 'Growth',
    'transparency': 'Decision Transparency',
    'motivation': 'Shared Motivation',
    'trust': 'Trust Within the Team',
    'confidence': 'Confidence Going Forward',
    'joy': 'Joy from Work',
}

LEADERSHIP_QUESTIONS: Dict[str, str] = {
    'clarity': 'Clarity of Expectations',
    'decision': 'Decision-Making & Follow-Through',
    'fairness': 'Fairness in Evaluation',
    'bias': 'Bias Awareness',
    'feedback': 'Quality of Feedback',
    'coaching': 'Coaching & Growth Support',
    'availability': 'Availability & Responsiveness',
    'safety': 'Psychological Safety',
    'consistency': 'Consistency & Reliability',
    'example': 'Leading by Example',
}

# Year in Review work-experience pulse (1-5 scale)
YEAR_IN_REVIEW_PULSE_QUESTIONS: Dict[str, str] = {
    'focus': 'Focused on What Matters',
    'clarity': 'Clarity and Guidance',
    'safety': 'Psychological Safety',
    'sustainability': 'Pace and Sustainability',
    'energy': 'Energy and Enjoyment',
    'growth': 'Growth',
    'transparency': 'Decision Transparency',
}

CORE_VALUES = [
    'Move Fast, Chase Excellence',
    'Take Ownership, Deliver Outcomes',
    'Invent & Simplify',
    'The Dream Team',
    'Have Honesty & Integrity',
    'Debate Openly, Commit Fully',
    'Product First',
]

RATING_MIN = 1
RATING_MAX = 10
YEAR_IN_REVIEW_RATING_MAX = 5


def label_for(tag_id: str, labels: Optional[Dict[str, str]] = None) -> str:
    """Resolve a tag id to its label, falling back to the raw id"""
    if labels is None:
        return tag_id
    return labels.get(tag_id, tag_id)
