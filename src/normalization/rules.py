"""
Ordered extraction rules for institution normalizers.

An institution declares its rules as an ordered tuple of ExtractionRule. The
first rule that matches the free-text field and yields a non-empty payee wins;
when none does, the normalizer delegates to its fallback (the GenericNormalizer
unless another one is injected).
"""
import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Callable, Optional, Tuple

from src.common.models import NormalizationResult, RawTransaction
from .base import BankNormalizer, build_normalized
from .generic import GenericNormalizer


def first_group(match: Match) -> str:
    return match.group(1)


@dataclass(frozen=True)
class ExtractionRule:
    """
    A (predicate, extractor) pair.

    Attributes:
        name: identifier reported in NormalizationResult.rule
        pattern: compiled case-insensitive pattern, searched in the free text
        extract: builds the payee candidate from the match
    """
    name: str
    pattern: Pattern
    extract: Callable[[Match], str] = first_group

    def matches(self, text: str) -> Optional[Match]:
        return self.pattern.search(text)

    def payee(self, text: str) -> Optional[str]:
        """Trimmed payee candidate, or None when the rule does not apply."""
        match = self.matches(text)
        if not match:
            return None
        candidate = self.extract(match)
        if candidate is None:
            return None
        return candidate.strip() or None


def rule(name: str, regex: str, extract: Callable[[Match], str] = first_group) -> ExtractionRule:
    return ExtractionRule(name, re.compile(regex, re.IGNORECASE), extract)


class RuleBasedNormalizer(BankNormalizer):
    """
    Institution normalizer driven by an ordered rule list.

    Subclasses set `institution_ids` and `rules`; `text_field` selects the
    provider field the rules are matched against.
    """

    rules: Tuple[ExtractionRule, ...] = ()
    text_field: str = 'remittanceInformationUnstructured'

    def __init__(self, fallback: Optional[BankNormalizer] = None):
        self.fallback = fallback if fallback is not None else GenericNormalizer()

    def match_rule(self, transaction: RawTransaction) -> Optional[Tuple[ExtractionRule, str]]:
        text = transaction.get(self.text_field)
        if not isinstance(text, str) or not text:
            return None
        for extraction_rule in self.rules:
            payee = extraction_rule.payee(text)
            if payee:
                return extraction_rule, payee
        return None

    def apply(self, transaction: RawTransaction, booked: bool) -> NormalizationResult:
        matched = self.match_rule(transaction)
        if matched is None:
            return self.fallback.apply(transaction, booked)

        extraction_rule, payee = matched
        return NormalizationResult(build_normalized(transaction, payee), extraction_rule.name)
