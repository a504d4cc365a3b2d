"""Domain entities, value objects, and pure policies of the admission gate."""

from __future__ import annotations

from .breadcrumbs import Breadcrumb, BreadcrumbTrail
from .categories import DEFAULT_CATEGORY, DEFAULT_LIMITS, ErrorCategory
from .counter import LimiterConfig, WindowCounter
from .levels import GATED_SEVERITIES, Severity
from .occurrence import ErrorOccurrence, normalise_error
from .policy import Decision, decide
from .privacy import anonymise_user, hash_email, hash_user_id
from .reports import LimiterStats, RateLimitStatus
from .signature import CONTEXT_FIELDS, derive_signature, string_hash

__all__ = [
    "Breadcrumb",
    "BreadcrumbTrail",
    "CONTEXT_FIELDS",
    "DEFAULT_CATEGORY",
    "DEFAULT_LIMITS",
    "Decision",
    "ErrorCategory",
    "ErrorOccurrence",
    "GATED_SEVERITIES",
    "LimiterConfig",
    "LimiterStats",
    "RateLimitStatus",
    "Severity",
    "WindowCounter",
    "anonymise_user",
    "decide",
    "derive_signature",
    "hash_email",
    "hash_user_id",
    "normalise_error",
    "string_hash",
]
