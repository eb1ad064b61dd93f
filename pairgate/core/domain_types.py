"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - INTEREST_LIMIT is shared by every tier (tiers only change time windows)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders (API responses are JSON)
"""

from enum import Enum


# ─── Limits ──────────────────────────────────────────────────────

INTEREST_LIMIT: int = 5
FOUNDING_CAP: int = 30
FOUNDING_TENURE_DAYS: int = 30
AGE_TOLERANCE_YEARS: int = 5


# ─── Enums ───────────────────────────────────────────────────────

class DiscoveryScope(str, Enum):
    """How wide the discovery feed reaches around the viewer's region."""
    LOCAL = "local"
    NEARBY = "nearby"
    TRAVEL = "travel"


class Density(str, Enum):
    """Locale density — sparse locales widen 'local' by one neighbor ring."""
    SPARSE = "sparse"
    MODERATE = "moderate"
    DENSE = "dense"


class Tier(str, Enum):
    """Account tier. Selects time windows only, never volume limits."""
    FREE = "free"
    PREMIUM = "premium"
    FOUNDING = "founding"


class IntentTag(str, Enum):
    """What a viewer is open to with a candidate."""
    SOCIAL = "social"
    CONVERSATION = "conversation"
    MEETING = "meeting"


class IntentOutcome(str, Enum):
    ACCEPTED = "accepted"
    CAP_REACHED = "cap_reached"


class ActionKind(str, Enum):
    """The three interaction types that share the dual-confirmation protocol."""
    MESSAGING = "messaging"
    RSVP = "rsvp"
    PRESENCE = "presence"


class ActionStatus(str, Enum):
    """Dual-confirmation lifecycle. ABSENT is never stored, only reported."""
    ABSENT = "absent"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    EXPIRED = "expired"


class Partner(str, Enum):
    PARTNER1 = "partner1"
    PARTNER2 = "partner2"


class EventType(str, Enum):
    """Virtual and travel events bypass the scope filter."""
    LOCAL = "local"
    VIRTUAL = "virtual"
    TRAVEL = "travel"


class PresenceSlot(str, Enum):
    TODAY = "today"
    TONIGHT = "tonight"


class GateCheck(str, Enum):
    """Messaging gate checks, in the order they are reported to the user."""
    LOCATION = "location"
    MUTUAL_INTEREST = "mutual_interest"
    SHARED_CONTEXT = "shared_context"
    DUAL_CONFIRMATION = "dual_confirmation"
