"""
Modele danych dla VAT Checker.

StatusVAT - status podatnika; pozostałe modele opisują odpowiedź API
Białej Listy (https://wl-api.mf.gov.pl).
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StatusVAT(str, Enum):
    """Status podatnika VAT."""

    ERROR = "error"
    ACTIVE = "active"
    EXEMPT = "exempt"
    NOT_REGISTERED = "not_registered"
    UNKNOWN = "unknown"

    @classmethod
    def from_registry(cls, value: Optional[str]) -> "StatusVAT":
        """
        Mapuje statusVat z API na StatusVAT.

        Pusty string oznacza brak statusu (NIEZNANY), każda inna nieznana
        wartość (także None) to błąd danych, a nie wyjątek.
        """
        if value is None:
            return cls.ERROR
        return _REGISTRY_STATUSES.get(value, cls.ERROR)

    @property
    def label(self) -> str:
        """Nazwa do wyświetlenia (słownictwo rejestru)."""
        return _LABELS[self]


_REGISTRY_STATUSES = {
    "Czynny": StatusVAT.ACTIVE,
    "Zwolniony": StatusVAT.EXEMPT,
    "Niezarejestrowany": StatusVAT.NOT_REGISTERED,
    "": StatusVAT.UNKNOWN,
}

_LABELS = {
    StatusVAT.ERROR: "Błąd",
    StatusVAT.ACTIVE: "Czynny",
    StatusVAT.EXEMPT: "Zwolniony",
    StatusVAT.NOT_REGISTERED: "Niezarejestrowany",
    StatusVAT.UNKNOWN: "Nieznany",
}


class _RegistryModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Subject(_RegistryModel):
    """
    Podmiot z Białej Listy.

    Typowane są tylko nip i statusVat; reszta pól jest przekazywana dalej
    bez interpretacji, więc nietypowa wartość nie psuje dekodowania.
    """

    nip: Optional[str] = Field(None, description="NIP (10 cyfr)")
    status_vat: Optional[str] = Field(None, alias="statusVat", description="Czynny/Zwolniony/Niezarejestrowany")

    name: Optional[Any] = Field(None, description="Nazwa firmy / imię i nazwisko")
    regon: Optional[Any] = None
    pesel: Optional[Any] = None
    krs: Optional[Any] = None
    residence_address: Optional[Any] = Field(None, alias="residenceAddress")
    working_address: Optional[Any] = Field(None, alias="workingAddress")
    account_numbers: Optional[Any] = Field(None, alias="accountNumbers")
    has_virtual_accounts: Optional[Any] = Field(None, alias="hasVirtualAccounts")
    registration_legal_date: Optional[Any] = Field(None, alias="registrationLegalDate")
    registration_denial_date: Optional[Any] = Field(None, alias="registrationDenialDate")
    registration_denial_basis: Optional[Any] = Field(None, alias="registrationDenialBasis")
    restoration_date: Optional[Any] = Field(None, alias="restorationDate")
    restoration_basis: Optional[Any] = Field(None, alias="restorationBasis")
    removal_date: Optional[Any] = Field(None, alias="removalDate")
    removal_basis: Optional[Any] = Field(None, alias="removalBasis")
    representatives: Optional[Any] = None
    authorized_clerks: Optional[Any] = Field(None, alias="authorizedClerks")
    partners: Optional[Any] = None

    @property
    def status(self) -> StatusVAT:
        return StatusVAT.from_registry(self.status_vat)


class EntryError(_RegistryModel):
    code: Optional[str] = None
    message: Optional[str] = None


class Entry(_RegistryModel):
    """Pozycja odpowiedzi /api/search/nips/ w formacie entries."""

    identifier: Optional[str] = None
    subjects: Optional[List[Subject]] = None
    error: Optional[EntryError] = None


class SearchResult(_RegistryModel):
    subject: Optional[Subject] = None
    subjects: Optional[List[Subject]] = None
    entries: Optional[List[Entry]] = None
    request_id: Optional[str] = Field(None, alias="requestId")
    request_date_time: Optional[str] = Field(None, alias="requestDateTime")


class WhitelistResponse(_RegistryModel):
    """
    Odpowiedź API Białej Listy.

    Błąd: {"code": "WL-113", "message": "..."}
    Sukces: {"result": {"subject": {...}}} lub {"result": {"subjects": [...]}}
    """

    code: Optional[str] = None
    message: Optional[str] = None
    result: Optional[SearchResult] = None
