"""Captain Cortex grounded-answer pipeline."""

from hostpilot.cortex.answer import generate_answer
from hostpilot.cortex.extract import extract_entities
from hostpilot.cortex.grounder import ground_question
from hostpilot.cortex.intent import detect_intent
from hostpilot.cortex.normalizer import NO_DATA_SENTINEL, normalize_for_llm

__all__ = [
    "NO_DATA_SENTINEL",
    "detect_intent",
    "extract_entities",
    "generate_answer",
    "ground_question",
    "normalize_for_llm",
]
