"""Deterministic keyword-based intent detection."""

from __future__ import annotations

import re

from hostpilot.cortex.types import DetectedIntent, QueryType

UNKNOWN_CONFIDENCE = 0.1

# Order doubles as the tie-break: specific domains win over the generic property bucket.
_KEYWORDS: dict[QueryType, tuple[str, ...]] = {
    QueryType.UTILITY: (
        r"utilit(?:y|ies)",
        r"electric(?:ity)?",
        r"water",
        r"internet",
        r"wi-?fi",
        r"gas",
        r"bills?",
        r"meters?",
        r"power",
    ),
    QueryType.TASK: (
        r"tasks?",
        r"clean(?:ing|er|ers)?",
        r"maintenance",
        r"repairs?",
        r"inspections?",
        r"chores?",
        r"to-?dos?",
        r"jobs?",
        r"housekeeping",
        r"assigned",
        r"pool service",
    ),
    QueryType.BOOKING: (
        r"bookings?",
        r"booked",
        r"reservations?",
        r"guests?",
        r"check-?ins?",
        r"check-?outs?",
        r"stays?",
        r"arrivals?",
        r"departures?",
        r"occupancy",
    ),
    QueryType.FINANCE: (
        r"financ(?:e|es|ial)",
        r"revenue",
        r"income",
        r"expenses?",
        r"costs?",
        r"profit",
        r"money",
        r"payments?",
        r"transactions?",
        r"payouts?",
        r"commissions?",
        r"earnings?",
        r"cash ?flow",
        r"spend(?:ing)?",
        r"budget",
    ),
    QueryType.PROPERTY: (
        r"propert(?:y|ies)",
        r"villas?",
        r"houses?",
        r"apartments?",
        r"condos?",
        r"listings?",
        r"portfolio",
        r"bedrooms?",
        r"bathrooms?",
        r"amenities",
    ),
}

_PATTERNS: dict[QueryType, tuple[re.Pattern[str], ...]] = {
    query_type: tuple(re.compile(rf"\b{keyword}\b", re.IGNORECASE) for keyword in keywords)
    for query_type, keywords in _KEYWORDS.items()
}


def detect_intent(question: str) -> DetectedIntent:
    """Classify a question into one query type.

    Each type scores one point per distinct keyword found. The highest score
    wins; ties go to the earlier type in the keyword table. Confidence grows
    with the winning hit count and shrinks when other types also matched.
    """

    text = question or ""
    scores = {
        query_type: sum(1 for pattern in patterns if pattern.search(text))
        for query_type, patterns in _PATTERNS.items()
    }
    total = sum(scores.values())
    if total == 0:
        return DetectedIntent(type=QueryType.UNKNOWN, confidence=UNKNOWN_CONFIDENCE)

    best_type = max(scores, key=lambda query_type: scores[query_type])
    best = scores[best_type]
    strength = min(0.95, 0.5 + 0.15 * best)
    margin = best / total
    confidence = round(max(0.0, min(1.0, strength * (0.5 + 0.5 * margin))), 2)
    return DetectedIntent(type=best_type, confidence=confidence)
