"""
Heuristic spam scoring for submission messages.

`assess_spam` returns a score in [0, 1] plus the reasons that contributed;
the caller decides the threshold (see FLAG_THRESHOLD).
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

FLAG_THRESHOLD = 0.5

_URL_RE = re.compile(r"https?://", re.IGNORECASE)
_REPEATED_RE = re.compile(r"(.)\1{5,}")
# Word characters are ASCII-only here; the Bangla block is allowed explicitly.
_SYMBOL_RE = re.compile(r"[^\w\s\u0980-\u09FF]", re.ASCII)
_NON_LATIN_RE = re.compile(r"[^A-Za-z]")
_NON_UPPER_RE = re.compile(r"[^A-Z]")


@dataclass
class SpamResult:
    score: float
    reasons: list[str] = field(default_factory=list)

    @property
    def flagged(self) -> bool:
        return self.score >= FLAG_THRESHOLD


def assess_spam(message: str) -> SpamResult:
    reasons: list[str] = []
    score = 0.0

    length = len(message)
    if length < 10:
        score += 0.15
        reasons.append("too_short")
    if length > 480:
        score += 0.05
        reasons.append("near_limit")

    urls = len(_URL_RE.findall(message))
    if urls > 0:
        score += 0.2 + min(0.2, (urls - 1) * 0.1)
        reasons.append("contains_url")

    if _REPEATED_RE.search(message):
        score += 0.2
        reasons.append("repetition")

    if length and len(_SYMBOL_RE.findall(message)) / length > 0.3:
        score += 0.15
        reasons.append("symbol_noise")

    latin = _NON_LATIN_RE.sub("", message)
    if len(latin) > 12:
        upper_ratio = len(_NON_UPPER_RE.sub("", latin)) / len(latin)
        if upper_ratio > 0.7:
            score += 0.1
            reasons.append("uppercase_shouting")

    return SpamResult(score=min(score, 1.0), reasons=reasons)
