"""Presentation buckets for plagiarism scores."""
from collections import namedtuple

ScoreTier = namedtuple('ScoreTier', ['label', 'color'])

EXCELLENT = ScoreTier('Excellent', 'green')
ACCEPTABLE = ScoreTier('Acceptable', 'orange')
ATTENTION = ScoreTier('Attention', 'red')


def score_tier(score):
    """Below 15 is Excellent, below 30 Acceptable, anything else needs attention."""
    if score < 15:
        return EXCELLENT
    if score < 30:
        return ACCEPTABLE
    return ATTENTION
