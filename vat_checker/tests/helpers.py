"""
Pomocnicze narzędzia testów - fałszywe API Białej Listy na httpx.MockTransport.
"""

from typing import Optional

import httpx

from vat_checker.validators import NIP_WEIGHTS

API_URL = "https://wl-api.test"

# KGHM Polska Miedź
CZYNNY_NIP = "692-00-00-013"
# Wygenerowany, poprawna suma kontrolna
NIEZNANY_NIP = "375-17-84-446"


def make_nip(prefix: int) -> Optional[str]:
    """Buduje poprawny NIP z 9-cyfrowego prefiksu (None jeśli reszta == 10)."""
    digits = f"{prefix:09d}"
    checksum = sum(int(d) * w for d, w in zip(digits, NIP_WEIGHTS)) % 11
    if checksum == 10:
        return None
    return digits + str(checksum)


def valid_nips(count: int, start: int = 100000000) -> list:
    nips = []
    prefix = start
    while len(nips) < count:
        nip = make_nip(prefix)
        if nip:
            nips.append(nip)
        prefix += 1
    return nips


class FakeRegistry:
    """
    Fałszywe API Białej Listy.

    statuses: {NIP: statusVat} - podmioty znane rejestrowi
    queued: odpowiedzi (httpx.Response albo wyjątek) zwracane przed normalną obsługą
    """

    def __init__(self, statuses: Optional[dict] = None):
        self.statuses = dict(statuses or {})
        self.queued = []
        self.requests = []

    def queue(self, item) -> None:
        self.queued.append(item)

    def queue_error(self, code: str, message: str, status_code: int = 400) -> None:
        self.queue(httpx.Response(status_code, json={"code": code, "message": message}))

    def _subject(self, nip: str) -> dict:
        return {
            "nip": nip,
            "name": f"PODMIOT {nip}",
            "statusVat": self.statuses[nip],
            "regon": "390021764",
            "accountNumbers": ["12345678901234567890123456"],
            "hasVirtualAccounts": False,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.queued:
            item = self.queued.pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        path = request.url.path
        meta = {"requestId": "abc-123", "requestDateTime": "19-10-2026 10:00:00"}

        if path.startswith("/api/search/nips/"):
            nips = path.rsplit("/", 1)[1].split(",")
            subjects = [self._subject(n) for n in nips if n in self.statuses]
            return httpx.Response(200, json={"result": {"subjects": subjects, **meta}})

        if path.startswith("/api/search/nip/"):
            nip = path.rsplit("/", 1)[1]
            subject = self._subject(nip) if nip in self.statuses else None
            return httpx.Response(200, json={"result": {"subject": subject, **meta}})

        return httpx.Response(404, text="Not Found")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeSleep:
    """Zapisuje pauzy zamiast czekać."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

