"""Blocked-keyword filter for sales and payment language.

Plain case-insensitive substring matching, no stemming and no context: a
false positive is preferred over a listing that slips through.
"""

from typing import Optional

from petcrush.common.exceptions import ValidationFailed

BLOCKED_KEYWORDS = (
    "R$", "$", "vendo", "venda", "valor", "preço", "preco", "pagamento", "pix",
    "cobro", "cobrando", "frete", "parcelado", "entrego", "aceito", "usd", "cash",
)

SALES_CONTENT_MESSAGE = "Sales content is not allowed."

_LOWERED = tuple((keyword, keyword.lower()) for keyword in BLOCKED_KEYWORDS)


def find_blocked_keyword(text: Optional[str]) -> Optional[str]:
    """Return the first blocked keyword found in *text*, or None."""
    if not text:
        return None
    lowered = text.lower()
    for keyword, needle in _LOWERED:
        if needle in lowered:
            return keyword
    return None


def ensure_clean(text: Optional[str], field: str) -> None:
    """Raise ``ValidationFailed`` on *field* when *text* contains sales language."""
    if find_blocked_keyword(text) is not None:
        raise ValidationFailed(SALES_CONTENT_MESSAGE, field=field)
