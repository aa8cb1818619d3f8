"""Captain Cortex question answering service."""

from __future__ import annotations

import logging
from datetime import date
from time import perf_counter

from sqlalchemy.orm import Session

from hostpilot.config import get_settings
from hostpilot.cortex.answer import generate_answer
from hostpilot.cortex.extract import extract_entities
from hostpilot.cortex.grounder import ground_question
from hostpilot.cortex.intent import detect_intent
from hostpilot.cortex.llm import ChatCompletionClient, get_default_chat_client
from hostpilot.cortex.roles import SUGGESTED_QUESTIONS, get_role_profile
from hostpilot.schemas.cortex import AnswerResult, RoleCapabilities, RoleGreeting, SuggestedQuestions

logger = logging.getLogger(__name__)


def answer_question(
    db: Session,
    question: str,
    organization_id: str,
    *,
    role: str = "admin",
    chat_client: ChatCompletionClient | None = None,
    today: date | None = None,
) -> AnswerResult:
    """Run intent detection, extraction, grounding and answer generation for one question."""

    settings = get_settings()
    profile = get_role_profile(role)
    started = perf_counter()

    intent = detect_intent(question)
    entities = extract_entities(question, today=today)
    parse_ms = (perf_counter() - started) * 1000.0

    outcome = ground_question(
        db,
        intent,
        entities,
        organization_id,
        allowed_domains=profile.allowed_domains,
        entity_triggers=settings.cortex_entity_triggers,
        limit=settings.cortex_connector_limit,
    )
    result = generate_answer(
        question,
        intent,
        outcome.data,
        chat_client=chat_client or get_default_chat_client(),
        role=profile.name,
    )

    logger.info(
        "cortex.ask organization_id=%s role=%s intent=%s entities=%s parse_ms=%.2f "
        "grounding_ms=%.2f answer_ms=%.2f total_ms=%.2f",
        organization_id,
        profile.name,
        intent.type.value,
        sorted(outcome.entities.populated()),
        parse_ms,
        outcome.data.metadata.total_latency_ms,
        result.latency,
        (perf_counter() - started) * 1000.0,
    )
    return result


def get_capabilities(role: str | None) -> RoleCapabilities:
    profile = get_role_profile(role)
    return RoleCapabilities(
        role=profile.name,
        tone=profile.tone,
        permissions=list(profile.permissions),
        data_domains=sorted(domain.value for domain in profile.allowed_domains),
    )


def get_greeting(role: str | None) -> RoleGreeting:
    profile = get_role_profile(role)
    return RoleGreeting(role=profile.name, greeting=profile.greeting)


def get_suggestions() -> SuggestedQuestions:
    return SuggestedQuestions(questions=list(SUGGESTED_QUESTIONS))
