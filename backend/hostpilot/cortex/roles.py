"""Role profiles: greeting, tone and which data domains a role may ground on."""

from __future__ import annotations

from dataclasses import dataclass

from hostpilot.cortex.types import DataDomain

DEFAULT_ROLE = "guest"

_ALL_DOMAINS = frozenset(DataDomain)


@dataclass(frozen=True, slots=True)
class RoleProfile:
    name: str
    tone: str
    greeting: str
    permissions: tuple[str, ...]
    allowed_domains: frozenset[DataDomain]
    guidelines: tuple[str, ...] = ()


ROLE_PROFILES: dict[str, RoleProfile] = {
    profile.name: profile
    for profile in (
        RoleProfile(
            name="admin",
            tone="authoritative, strategic, full access to all systems and data",
            greeting=(
                "Captain Cortex reporting! Full systems online. "
                "You have complete access to all data and operations in HostPilot."
            ),
            permissions=("all",),
            allowed_domains=_ALL_DOMAINS,
            guidelines=(
                "Provide comprehensive operational insights",
                "Focus on strategic decisions and efficiency",
            ),
        ),
        RoleProfile(
            name="portfolio-manager",
            tone="professional, problem-solving, focused on property performance and team coordination",
            greeting=(
                "Welcome back, Portfolio Captain! Ready to navigate your villas, "
                "coordinate staff, and optimize performance."
            ),
            permissions=("assigned_properties", "financials", "staff_tasks", "guest_communication"),
            allowed_domains=_ALL_DOMAINS,
            guidelines=(
                "Focus on property performance and team coordination",
                "Emphasize revenue and operational workflows",
            ),
        ),
        RoleProfile(
            name="staff",
            tone="clear, instructional, task-oriented with no owner-level financial data",
            greeting=(
                "Captain Cortex here! Let's tackle today's task list and keep everything "
                "running smoothly."
            ),
            permissions=("task_lists", "maintenance_logs", "guest_requests"),
            allowed_domains=frozenset({DataDomain.PROPERTIES, DataDomain.TASKS}),
            guidelines=("Provide clear, actionable task instructions", "Avoid financial information"),
        ),
        RoleProfile(
            name="guest",
            tone="friendly, helpful, customer-service tone; never expose internal or financial data",
            greeting=(
                "Hello traveler! I'm Captain Cortex, here to make your stay seamless. "
                "Need info or concierge services? Just ask!"
            ),
            permissions=("basic_info", "concierge_services"),
            allowed_domains=frozenset(),
            guidelines=("Never reveal internal operations, pricing, or financial data",),
        ),
        RoleProfile(
            name="owner",
            tone="professional and transparent, focusing on their property performance and expenses",
            greeting=(
                "Greetings, Property Captain! I have your financials, reports, "
                "and maintenance updates ready for review."
            ),
            permissions=("view_financials", "reports", "maintenance_updates"),
            allowed_domains=_ALL_DOMAINS,
            guidelines=("Provide transparent reporting on expenses and revenue",),
        ),
        RoleProfile(
            name="retail-agent",
            tone="sales-oriented, professional, emphasize availability and pricing",
            greeting=(
                "Captain Cortex checking in! Live villa availability and your "
                "commission opportunities are ready for takeoff."
            ),
            permissions=("booking_engine", "commission_tracking", "villa_info"),
            allowed_domains=frozenset({DataDomain.PROPERTIES, DataDomain.BOOKINGS}),
            guidelines=("Emphasize booking opportunities and availability",),
        ),
        RoleProfile(
            name="referral-agent",
            tone="motivational, partner-focused, highlight referral performance",
            greeting=(
                "Welcome back, Partner! I've got your referral performance and "
                "villa stats ready to review."
            ),
            permissions=("commission_tracking", "referred_villas"),
            allowed_domains=frozenset({DataDomain.PROPERTIES}),
            guidelines=("Focus on referral performance",),
        ),
    )
}

SUGGESTED_QUESTIONS: tuple[str, ...] = (
    "What is the Villa Aruna utility bill status for January 2025?",
    "Which tasks are pending this week?",
    "Show me confirmed bookings for next month",
    "What was the total income and expenses for Villa Aruna in 2025?",
    "Are there any overdue electricity bills?",
    "List all properties in the portfolio",
)


def get_role_profile(role: str | None) -> RoleProfile:
    """Return the profile for `role`; unknown or missing roles get the guest profile."""

    key = (role or "").strip().lower()
    return ROLE_PROFILES.get(key) or ROLE_PROFILES[DEFAULT_ROLE]


def allowed_domains(role: str | None) -> frozenset[DataDomain]:
    return get_role_profile(role).allowed_domains


def role_instruction(role: str | None) -> str:
    """System-prompt fragment describing the caller's role and tone."""

    profile = get_role_profile(role)
    lines = [f"USER ROLE: {profile.name.upper()}", f"CONVERSATIONAL TONE: {profile.tone}"]
    lines.extend(f"- {guideline}" for guideline in profile.guidelines)
    return "\n".join(lines)
