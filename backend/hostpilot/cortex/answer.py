"""Answer generation from grounded data."""

from __future__ import annotations

import logging
from time import perf_counter

from hostpilot.config import get_settings
from hostpilot.cortex.llm import ChatCompletionClient, CortexLLMError
from hostpilot.cortex.normalizer import NO_DATA_SENTINEL, normalize_for_llm
from hostpilot.cortex.roles import role_instruction
from hostpilot.cortex.types import DetectedIntent, GroundedData
from hostpilot.schemas.cortex import AnswerResult, SourceRef

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Captain Cortex for HostPilot, a property management assistant.

CRITICAL RULES:
1. Only answer using the provided internal data (properties, tasks, utility bills, finances, bookings).
2. If data is missing or ambiguous, ask for the missing fields or clearly state you cannot find it.
3. Provide concise, actionable summaries. No speculation or assumptions.
4. Always mention specific data points (dates, amounts, statuses) when available.
5. Use a professional, helpful tone."""

_FAILURE_REASONS: dict[str, str] = {
    "not_configured": "the answer service is not configured",
    "authentication": "the answer service rejected our credentials",
    "rate_limit": "the answer service is receiving too many requests",
    "timeout": "the answer service took too long to respond",
    "unavailable": "the answer service is temporarily unavailable",
    "malformed_response": "the answer service returned an unreadable response",
}


def generate_answer(
    question: str,
    intent: DetectedIntent,
    grounded: GroundedData,
    *,
    chat_client: ChatCompletionClient,
    role: str | None = None,
) -> AnswerResult:
    """Answer a question strictly from `grounded`.

    No model call is made when there is no data. Model failures produce a
    fixed apology naming the failure class; they are never raised.
    """

    started = perf_counter()
    context = normalize_for_llm(grounded)
    has_data = context != NO_DATA_SENTINEL

    if not has_data:
        answer = no_data_answer(question)
    else:
        try:
            answer = chat_client.complete(
                build_messages(question, context, role=role),
                temperature=get_settings().cortex_temperature,
            )
        except CortexLLMError as exc:
            logger.exception("cortex.answer_failed intent=%s kind=%s", intent.type.value, exc.kind)
            answer = failure_answer(exc.kind)
        except Exception:
            logger.exception("cortex.answer_failed intent=%s kind=unexpected", intent.type.value)
            answer = failure_answer("unavailable")

    latency_ms = (perf_counter() - started) * 1000.0
    logger.info(
        "cortex.answer intent=%s confidence=%.2f has_data=%s sources=%d elapsed_ms=%.2f",
        intent.type.value,
        intent.confidence,
        has_data,
        len(grounded.metadata.sources),
        latency_ms,
    )
    return AnswerResult(
        answer=answer,
        sources=[SourceRef(route=source.route, params=dict(source.params)) for source in grounded.metadata.sources],
        latency=latency_ms,
        cached=False,
        intent=intent.type.value,
        confidence=intent.confidence,
    )


def build_messages(question: str, context: str, *, role: str | None = None) -> list[dict[str, str]]:
    system = SYSTEM_PROMPT if role is None else f"{SYSTEM_PROMPT}\n\n{role_instruction(role)}"
    return [
        {"role": "system", "content": system},
        {
            "role": "user",
            "content": (
                f"QUESTION: {question}\n\nINTERNAL DATA:\n{context}\n\n"
                "Provide a concise, data-grounded answer using ONLY the information above."
            ),
        },
    ]


def no_data_answer(question: str) -> str:
    return (
        "I couldn't find any relevant information in the internal system for your question: "
        f'"{question}"\n\n'
        "This could be because:\n"
        "- The property name might be spelled differently\n"
        "- The data hasn't been uploaded yet\n"
        "- The time period specified doesn't have any records\n\n"
        "Please check the property name, dates, or other details and try again."
    )


def failure_answer(kind: str) -> str:
    reason = _FAILURE_REASONS.get(kind, _FAILURE_REASONS["unavailable"])
    return (
        f"I'm sorry, I couldn't generate an answer right now because {reason}. "
        "The data I looked up is listed in the sources. Please try again in a moment."
    )
