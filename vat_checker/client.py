"""
Klient API Białej Listy VAT (wl-api.mf.gov.pl).

Weryfikacja statusu VAT po NIP - pojedynczo (/api/search/nip/) albo
paczkami po 30 NIP-ów (/api/search/nips/). Klient nie ponawia zapytań,
tym zajmuje się VATVerifier (retry.py).
"""

import logging
from typing import Dict, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from .config import VATCheckerSettings, get_settings
from .exceptions import VATError, error_from_code
from .models import SearchResult, StatusVAT, Subject, WhitelistResponse
from .validators import (
    MAX_NIPS_PER_REQUEST,
    DateArg,
    is_valid_nip,
    nip_portions,
    parse_nip,
    partition_nips,
    resolve_date,
)

logger = logging.getLogger(__name__)


class WhitelistClient:
    """
    Klient do komunikacji z API Białej Listy VAT.

    Każde wywołanie to nowe zapytanie do rejestru (bez cache). Błędy
    sygnalizowane są wyjątkiem VATError z flagą permanent.
    """

    NIP_RESOURCE = "/api/search/nip/{nip}"
    NIPS_RESOURCE = "/api/search/nips/{nips}"

    def __init__(
        self,
        settings: Optional[VATCheckerSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization klienta HTTP."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.vat_request_timeout_sec),
                headers={
                    "User-Agent": self.settings.vat_user_agent,
                    "Accept-Language": self.settings.vat_accept_language,
                    "Accept": "application/json",
                },
                transport=self._transport,
            )
        return self._http_client

    async def close(self):
        """Zamknij klienta HTTP."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _search(self, resource: str, date_str: str) -> SearchResult:
        """
        Wysyła GET do API i dekoduje odpowiedź.

        Raises:
            VATError - permanent dla kodów WL odrzucających zapytanie,
            przejściowy dla błędów sieci, dekodowania i limitów API
        """
        client = await self._get_client()
        url = self.settings.api_base + resource

        logger.debug("Biała Lista VAT: GET %s (date=%s)", url, date_str)

        try:
            response = await client.get(url, params={"date": date_str})
        except httpx.HTTPError as e:
            logger.warning("Biała Lista VAT: błąd połączenia: %s", e)
            raise VATError(str(e) or type(e).__name__, permanent=False) from e

        # Status HTTP nie jest sprawdzany - API zwraca {code, message} także przy 400
        try:
            payload = WhitelistResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(
                "Biała Lista VAT: nieprawidłowa odpowiedź (HTTP %d): %s",
                response.status_code, e.errors()[0]["msg"] if e.errors() else e,
            )
            raise VATError(f"invalid response: {e}", permanent=False) from e

        if payload.code:
            error = error_from_code(payload.code, payload.message)
            logger.warning(
                "Biała Lista VAT: %s (permanent=%s)", error.message, error.permanent
            )
            raise error

        if payload.result is None:
            raise VATError("invalid response: missing result", permanent=False)

        return payload.result

    async def fetch_subject(self, nip: str, on_date: DateArg = None) -> Optional[Subject]:
        """
        Pobiera dane podmiotu dla jednego NIP.

        Args:
            nip: NIP w dowolnym formacie (spacje, myślniki)
            on_date: data stanu (domyślnie dzisiaj)

        Returns:
            Subject albo None, jeśli rejestr nie zwrócił podmiotu
        """
        parsed = parse_nip(nip)
        if not is_valid_nip(parsed):
            raise VATError("wrong NIP format", permanent=True)

        date_str = resolve_date(on_date)

        result = await self._search(self.NIP_RESOURCE.format(nip=parsed), date_str)
        return result.subject

    async def verify_nip(self, nip: str, on_date: DateArg = None) -> StatusVAT:
        """
        Sprawdza status VAT jednego NIP.

        Brak podmiotu w odpowiedzi (lub pusty statusVat) daje StatusVAT.ERROR.
        """
        subject = await self.fetch_subject(nip, on_date)

        if subject is None or not subject.status_vat:
            logger.warning("Biała Lista VAT: brak statusu dla NIP %s", parse_nip(nip))
            return StatusVAT.ERROR

        status = subject.status
        logger.info("Biała Lista VAT: NIP %s - %s", subject.nip or parse_nip(nip), status.label)
        return status

    async def verify_nips(self, nips: Iterable[str], on_date: DateArg = None) -> Dict[str, StatusVAT]:
        """
        Sprawdza status VAT wielu NIP-ów.

        Klucze wyniku to NIP-y w formie podanej przez wywołującego.
        Niepoprawne NIP-y dostają ERROR, poprawne nieznalezione - UNKNOWN.
        Błąd dowolnej paczki przerywa całe wywołanie (bez wyników częściowych).
        """
        good, bad = partition_nips(nips)
        date_str = resolve_date(on_date)

        statuses: Dict[str, StatusVAT] = {}
        # Indeks: oczyszczony NIP -> wszystkie surowe zapisy tego NIP
        by_nip: Dict[str, List[str]] = {}

        for raw, parsed in good.items():
            statuses[raw] = StatusVAT.UNKNOWN
            by_nip.setdefault(parsed, []).append(raw)

        for raw in bad:
            statuses[raw] = StatusVAT.ERROR

        if bad:
            logger.info("Biała Lista VAT: %d niepoprawnych NIP pominięto", len(bad))

        portions = nip_portions(by_nip, MAX_NIPS_PER_REQUEST)
        for i, portion in enumerate(portions, 1):
            logger.debug("Biała Lista VAT: paczka %d/%d (%d NIP)", i, len(portions), len(portion))

            result = await self._search(
                self.NIPS_RESOURCE.format(nips=",".join(portion)), date_str
            )

            for subject in self._bulk_subjects(result):
                # Brak statusVat w paczce = status nieznany
                status = StatusVAT.from_registry(subject.status_vat or "")
                for raw in by_nip.get(subject.nip or "", []):
                    statuses[raw] = status

        logger.info(
            "Biała Lista VAT: sprawdzono %d NIP (%d zapytań)", len(statuses), len(portions)
        )
        return statuses

    @staticmethod
    def _bulk_subjects(result: SearchResult) -> List[Subject]:
        """Podmioty z odpowiedzi /nips/ - lista subjects albo entries."""
        subjects = list(result.subjects or [])

        for entry in result.entries or []:
            if entry.error and entry.error.code:
                logger.warning(
                    "Biała Lista VAT: NIP %s - %s: %s",
                    entry.identifier, entry.error.code, entry.error.message,
                )
                continue
            for subject in entry.subjects or []:
                if not subject.nip and entry.identifier:
                    subject = subject.model_copy(update={"nip": entry.identifier})
                subjects.append(subject)

        return subjects
