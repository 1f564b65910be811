from .widiba import WidibaNormalizer
from .sandbox_finance import SandboxFinanceNormalizer

# Normalizer classes loaded into the default registry. Adding an institution
# means adding its class here.
BANK_NORMALIZERS = (
    WidibaNormalizer,
    SandboxFinanceNormalizer,
)

__all__ = [
    'BANK_NORMALIZERS',
    'WidibaNormalizer',
    'SandboxFinanceNormalizer',
]
