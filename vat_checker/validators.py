"""
Walidatory NIP i daty zapytania.
"""

import re
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from .exceptions import VATError

# Wagi dla sumy kontrolnej NIP
NIP_WEIGHTS = (6, 5, 7, 2, 3, 4, 5, 6, 7)

# Limit API Białej Listy dla /api/search/nips/
MAX_NIPS_PER_REQUEST = 30

DATE_FORMAT = "%Y-%m-%d"

_TEN_DIGITS = re.compile(r"^[0-9]{10}$")
_ISO_DATE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

DateArg = Union[date, datetime, str, None]


def parse_nip(nip: str) -> str:
    """
    Czyści NIP: obcina białe znaki z brzegów i usuwa myślniki.

    Przykład: " 692-00-00-013\\t" -> "6920000013"
    """
    return nip.strip(" \t\r\n").replace("-", "")


def is_valid_nip(nip: str) -> bool:
    """
    Sprawdza format (10 cyfr) i sumę kontrolną NIP.

    Suma ważona pierwszych 9 cyfr modulo 11 musi być równa 10. cyfrze.
    Reszta 10 nigdy nie jest równa cyfrze, więc taki NIP jest odrzucany.
    """
    if not _TEN_DIGITS.match(nip):
        return False

    digits = [int(d) for d in nip]
    checksum = sum(d * w for d, w in zip(digits[:9], NIP_WEIGHTS)) % 11

    return checksum == digits[9]


def split_nips(nips: Mapping[str, str]) -> Tuple[dict, dict]:
    """
    Dzieli mapę {surowy NIP: oczyszczony NIP} na poprawne i niepoprawne.

    Returns:
        Tuple (good, bad) - każdy surowy klucz trafia do dokładnie jednej mapy
    """
    good = {}
    bad = {}

    for raw, parsed in nips.items():
        if is_valid_nip(parsed):
            good[raw] = parsed
        else:
            bad[raw] = parsed

    return good, bad


def partition_nips(raw_nips: Iterable[str]) -> Tuple[dict, dict]:
    """Czyści surowe NIP-y i dzieli je na poprawne i niepoprawne."""
    return split_nips({raw: parse_nip(raw) for raw in raw_nips})


def nip_portions(nips: Iterable[str], size: int = MAX_NIPS_PER_REQUEST) -> List[List[str]]:
    """
    Dzieli NIP-y na paczki po maksymalnie `size` sztuk (jedna paczka = jedno zapytanie).

    Duplikaty są pomijane, kolejność pierwszego wystąpienia zachowana.
    """
    if size < 1:
        raise ValueError("size must be >= 1")

    unique = list(dict.fromkeys(nips))
    return [unique[i:i + size] for i in range(0, len(unique), size)]


def resolve_date(value: DateArg = None) -> str:
    """
    Zamienia datę zapytania na format YYYY-MM-DD.

    Args:
        value: None (dzisiaj), date/datetime albo string "YYYY-MM-DD"

    Raises:
        VATError (permanent) dla złego formatu lub typu
    """
    if value is None:
        return date.today().strftime(DATE_FORMAT)

    # datetime dziedziczy po date - strftime obcina godzinę
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)

    if isinstance(value, str) and _ISO_DATE.match(value):
        try:
            return datetime.strptime(value, DATE_FORMAT).strftime(DATE_FORMAT)
        except ValueError:
            pass

    raise VATError("wrong date format: use YYYY-MM-DD or datetime.date", permanent=True)


def format_nip(nip: Optional[str]) -> Optional[str]:
    """
    Formatuje NIP do postaci XXX-XXX-XX-XX.

    Returns:
        Sformatowany NIP lub None, jeśli to nie jest 10 cyfr
    """
    if not nip:
        return None

    parsed = parse_nip(nip)
    if not _TEN_DIGITS.match(parsed):
        return None

    return f"{parsed[:3]}-{parsed[3:6]}-{parsed[6:8]}-{parsed[8:10]}"
