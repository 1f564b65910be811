"""
Bank Registry

Maps provider institution identifiers to their normalizer. The default registry
is assembled once from BANK_NORMALIZERS and is read-only afterwards, so it can
be shared by concurrent requests without locking.
"""
from typing import Dict, Iterable, List, Optional

from .banks import BANK_NORMALIZERS
from .base import BankNormalizer
from .exceptions import DuplicateInstitutionError
from .generic import GenericNormalizer


class BankRegistry:
    """
    Registry of institution normalizers.

    Unknown institutions resolve to the generic normalizer; each known
    institution resolves to exactly one normalizer.
    """

    def __init__(self, normalizers: Iterable[BankNormalizer] = (), generic: Optional[BankNormalizer] = None):
        """
        Args:
            normalizers: institution normalizers to register
            generic: fallback for unknown institutions (GenericNormalizer by default)

        Raises:
            DuplicateInstitutionError: two normalizers claim the same institution id
        """
        self.generic = generic if generic is not None else GenericNormalizer()
        self._normalizers: Dict[str, BankNormalizer] = {}
        for normalizer in normalizers:
            self.register(normalizer)

    def register(self, normalizer: BankNormalizer) -> None:
        """Registers every institution id of the normalizer, all or nothing."""
        ids = list(normalizer.institution_ids)
        for institution_id in ids:
            existing = self._normalizers.get(institution_id)
            if existing is not None:
                raise DuplicateInstitutionError(institution_id, existing.name, normalizer.name)
        if len(set(ids)) != len(ids):
            duplicated = next(i for i in ids if ids.count(i) > 1)
            raise DuplicateInstitutionError(duplicated, normalizer.name, normalizer.name)

        for institution_id in ids:
            self._normalizers[institution_id] = normalizer

    def resolve(self, institution_id: Optional[str]) -> BankNormalizer:
        if not institution_id:
            return self.generic
        return self._normalizers.get(institution_id, self.generic)

    def institution_ids(self) -> List[str]:
        return sorted(self._normalizers)

    def __contains__(self, institution_id: str) -> bool:
        return institution_id in self._normalizers


def build_default_registry() -> BankRegistry:
    generic = GenericNormalizer()
    return BankRegistry((cls(fallback=generic) for cls in BANK_NORMALIZERS), generic=generic)


# Built at import time: a duplicate institution id fails at startup
_DEFAULT_REGISTRY = build_default_registry()


def default_registry() -> BankRegistry:
    """Process-wide registry of every known institution normalizer."""
    return _DEFAULT_REGISTRY
