from src.normalization.rules import RuleBasedNormalizer, rule


class WidibaNormalizer(RuleBasedNormalizer):
    """
    Banca Widiba. Payee and counterparty are buried in the Italian
    "Causale: ... - Descrizione: ..." remittance text.
    """
    institution_ids = ('WIDIBA_WIDIITMM',)

    rules = (
        # ... RICEZIONE DENARO CON BANCOMAT PAY DA NOME COGNOME DATA: 02-06-2025 ...
        rule(
            'bancomat_pay_receipt',
            r"RICEZIONE DENARO CON BANCOMAT PAY DA\s+(.+?)\s+DATA:",
            lambda m: f"da {m.group(1).strip().lower()}",
        ),
        # ... Comm. Bon 0,00 Caus: 048 Regalo
        rule('causale_code', r"Caus:\s*\d+\s+(.+)$"),
        # ... LOC.ROMA ESERCENTE: TRENITALIA - PT WL ...
        rule('merchant', r"esercente:\s*([^-]+)"),
        # Descrizione: Addebito Sdd N. X a Favore <creditor> Codice Mandato ...
        rule('sdd_direct_debit', r"Descrizione:\s*(Addebito Sdd\b.*?\ba Favore\s+.+?)\s+Codice Mandato"),
    )
