# ABOUTME: Matching package: normalization, scoring, confidence gating, and catalog resolution.
# ABOUTME: Exports the pure helpers and the CandidateResolver used by the request pipeline.

from bookscout.matching.gate import AskForDetail, Proceed, Reject, decide, decide_photo
from bookscout.matching.normalizer import build_fallback_query, is_bad_query, normalize
from bookscout.matching.resolver import BestMatch, CandidateResolver, SearchAttempt
from bookscout.matching.scoring import score_candidate

__all__ = [
    "AskForDetail",
    "BestMatch",
    "CandidateResolver",
    "Proceed",
    "Reject",
    "SearchAttempt",
    "build_fallback_query",
    "decide",
    "decide_photo",
    "is_bad_query",
    "normalize",
    "score_candidate",
]
