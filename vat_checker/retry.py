"""
Ponawianie zapytań do Białej Listy przy błędach przejściowych.

Backoff wykładniczy: 1s, 2s, 4s, 8s... (bez pauzy po ostatniej próbie).
Błędy trwałe (permanent=True) i wyjątki spoza VATError nie są ponawiane.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, Optional, TypeVar

import httpx

from .client import WhitelistClient
from .config import VATCheckerSettings, get_settings
from .exceptions import VATError
from .models import StatusVAT, Subject
from .validators import DateArg

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


async def call_with_retry(
    call: Callable[[], Awaitable[T]],
    retry_count: int,
    base_delay: float = 1.0,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Wywołuje `call` maksymalnie `retry_count` razy.

    Args:
        call: bezargumentowa korutyna (np. lambda: client.verify_nip(nip))
        retry_count: limit prób (>= 1)
        base_delay: pauza przed drugą próbą, potem podwajana
        sleep: funkcja pauzy (podmieniana w testach)

    Raises:
        VATError z ostatniej próby albo pierwszy błąd trwały
    """
    if retry_count < 1:
        raise ValueError("retry_count must be >= 1")

    delay = base_delay

    for attempt in range(1, retry_count + 1):
        try:
            return await call()
        except VATError as e:
            if e.permanent:
                raise
            if attempt == retry_count:
                logger.error("VAT: limit prób wyczerpany (%d): %s", retry_count, e.message)
                raise

            logger.warning(
                "VAT: błąd przejściowy (próba %d/%d), ponawiam za %.1fs: %s",
                attempt, retry_count, delay, e.message,
            )
            await sleep(delay)
            delay *= 2

    # retry_count >= 1, pętla zawsze kończy się return albo raise
    raise AssertionError("unreachable")


class VATVerifier:
    """
    Weryfikacja statusu VAT z ponawianiem.

    Użycie:
        async with VATVerifier() as verifier:
            status = await verifier.verify_nip("692-00-00-013")
    """

    def __init__(
        self,
        settings: Optional[VATCheckerSettings] = None,
        client: Optional[WhitelistClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self.client = client or WhitelistClient(self.settings, transport=transport)
        self._sleep = sleep

    async def __aenter__(self) -> "VATVerifier":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.client.close()

    async def _retry(self, call: Callable[[], Awaitable[T]]) -> T:
        return await call_with_retry(
            call,
            retry_count=self.settings.vat_retry_count,
            base_delay=self.settings.vat_retry_base_delay_sec,
            sleep=self._sleep,
        )

    async def verify_nip(self, nip: str, on_date: DateArg = None) -> StatusVAT:
        """Status VAT jednego NIP (z ponawianiem)."""
        return await self._retry(lambda: self.client.verify_nip(nip, on_date))

    async def verify_nips(self, nips: Iterable[str], on_date: DateArg = None) -> Dict[str, StatusVAT]:
        """Status VAT wielu NIP-ów (z ponawianiem całego wywołania)."""
        # Lista, bo generator wyczerpałby się po pierwszej próbie
        nips = list(nips)
        return await self._retry(lambda: self.client.verify_nips(nips, on_date))

    async def fetch_subject(self, nip: str, on_date: DateArg = None) -> Optional[Subject]:
        """Dane podmiotu z Białej Listy (z ponawianiem)."""
        return await self._retry(lambda: self.client.fetch_subject(nip, on_date))
