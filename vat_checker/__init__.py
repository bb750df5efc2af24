"""
VAT Checker - weryfikacja statusu VAT w Białej Liście Ministerstwa Finansów.

Sprawdza status podatnika po NIP (pojedynczo lub zbiorczo) z walidacją sumy
kontrolnej i ponawianiem zapytań przy błędach przejściowych.
"""

__version__ = "0.1.0"

from .client import WhitelistClient
from .config import VATCheckerSettings, get_settings
from .exceptions import VATError
from .models import StatusVAT, Subject
from .retry import VATVerifier, call_with_retry
from .validators import is_valid_nip, parse_nip, resolve_date

__all__ = [
    "VATVerifier",
    "WhitelistClient",
    "VATCheckerSettings",
    "get_settings",
    "VATError",
    "StatusVAT",
    "Subject",
    "call_with_retry",
    "is_valid_nip",
    "parse_nip",
    "resolve_date",
]
