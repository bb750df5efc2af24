"""
Wyjątki klienta Białej Listy VAT.
"""

from typing import Optional

# Kody API oznaczające limit zapytań lub chwilową niedostępność usługi
TRANSIENT_ERROR_CODES = frozenset({"WL-100", "WL-191", "WL-195", "WL-196"})


class VATError(Exception):
    """
    Błąd weryfikacji statusu VAT.

    permanent=True - błąd po stronie zapytania (zły NIP, zła data, odrzucone
    przez rejestr); ponawianie nic nie da.
    permanent=False - błąd przejściowy (sieć, limit zapytań, awaria API).
    """

    def __init__(self, message: str, permanent: bool, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.permanent = permanent
        self.code = code

    @property
    def is_permanent(self) -> bool:
        return self.permanent

    def __repr__(self) -> str:
        return f"VATError({self.message!r}, permanent={self.permanent})"


def error_from_code(code: str, message: Optional[str]) -> VATError:
    """Buduje VATError z kodu błędu zwróconego przez API (np. WL-113)."""
    return VATError(
        f"{code}: {message or ''}",
        permanent=code not in TRANSIENT_ERROR_CODES,
        code=code,
    )
