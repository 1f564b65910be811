"""
Transaction Normalization Module

Turns provider transactions into the canonical shape:
- BankNormalizer capability and GenericNormalizer fallback
- Ordered extraction rules for institution normalizers
- Institution normalizers (banks/)
- BankRegistry mapping institution ids to normalizers
"""

# Base classes
from .base import BankNormalizer, DATE_FIELDS, resolve_date, title_case
from .generic import GenericNormalizer, GENERIC_RULE
from .rules import ExtractionRule, RuleBasedNormalizer, rule

# Banks
from .banks import BANK_NORMALIZERS, WidibaNormalizer, SandboxFinanceNormalizer

# Registry
from .exceptions import DuplicateInstitutionError
from .registry import BankRegistry, build_default_registry, default_registry

__all__ = [
    # Base
    'BankNormalizer',
    'DATE_FIELDS',
    'resolve_date',
    'title_case',
    'GenericNormalizer',
    'GENERIC_RULE',
    'ExtractionRule',
    'RuleBasedNormalizer',
    'rule',
    # Banks
    'BANK_NORMALIZERS',
    'WidibaNormalizer',
    'SandboxFinanceNormalizer',
    # Registry
    'DuplicateInstitutionError',
    'BankRegistry',
    'build_default_registry',
    'default_registry',
]
