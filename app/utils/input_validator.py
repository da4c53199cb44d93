"""Free-text checks applied before any text reaches an external service."""

import re
from dataclasses import dataclass
from typing import Optional

REASON_EMPTY = "empty"
REASON_TOO_LONG = "too_long"
REASON_MALICIOUS = "malicious_content"
REASON_PROHIBITED = "prohibited_pattern"

SUSPICIOUS_PATTERNS = [
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),  # script blocks
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),  # inline event handlers
    re.compile(r"data:text/html", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
]

SPAM_PATTERNS = [
    re.compile(r"\b(spam|viagra|casino|poker|bet)\b", re.IGNORECASE),
    re.compile(r"(http|https)://[^\s]+"),
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    reason: Optional[str] = None
    error: Optional[str] = None


VALID = ValidationResult(is_valid=True)


def validate_text(text: Optional[str], max_length: int) -> ValidationResult:
    """Validate user text. Rules apply in order and the first match wins."""
    if not text or not text.strip():
        return ValidationResult(False, REASON_EMPTY, "Please enter a description of the movies you want")

    if len(text) > max_length:
        return ValidationResult(
            False,
            REASON_TOO_LONG,
            f"Text too long. Maximum {max_length} characters allowed.",
        )

    if any(pattern.search(text) for pattern in SUSPICIOUS_PATTERNS):
        return ValidationResult(False, REASON_MALICIOUS, "Potentially malicious content detected")

    if any(pattern.search(text) for pattern in SPAM_PATTERNS):
        return ValidationResult(False, REASON_PROHIBITED, "Content contains prohibited patterns")

    return VALID
