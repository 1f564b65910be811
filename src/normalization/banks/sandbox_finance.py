from src.normalization.rules import RuleBasedNormalizer, rule


class SandboxFinanceNormalizer(RuleBasedNormalizer):
    """Provider demo bank, used to exercise bank sync without a real account."""
    institution_ids = ('SANDBOXFINANCE_SFIN0000',)

    rules = (
        # "PAYMENT TO Freshto Ltd" / "PAYMENT AT Coffee Corner ON 2024-01-03"
        rule('card_payment', r"PAYMENT\s+(?:TO|AT)\s+(.+?)(?:\s+ON\s+\d|$)"),
    )
