"""
CLI: check-vat - weryfikacja statusu VAT w Białej Liście.

Przykłady:
    check-vat 692-00-00-013
    check-vat 6920000013 5260250995 --date 2024-01-15
"""

import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import Optional, Tuple

import click

from . import __version__
from .config import VATCheckerSettings, get_settings
from .exceptions import VATError
from .models import StatusVAT, Subject
from .retry import VATVerifier
from .validators import format_nip, parse_nip

logger = logging.getLogger(__name__)


def _build_settings(retries: Optional[int], api_url: Optional[str]) -> VATCheckerSettings:
    settings = get_settings()
    overrides = {}
    if retries is not None:
        overrides["vat_retry_count"] = retries
    if api_url:
        overrides["vat_api_url"] = api_url
    return settings.model_copy(update=overrides) if overrides else settings


def _print_subject(subject: Subject) -> None:
    click.echo(f"  Nazwa: {subject.name or '-'}")
    click.echo(f"  NIP: {format_nip(subject.nip) or subject.nip or '-'}")
    if subject.regon:
        click.echo(f"  REGON: {subject.regon}")
    if subject.krs:
        click.echo(f"  KRS: {subject.krs}")
    address = subject.working_address or subject.residence_address
    if address:
        click.echo(f"  Adres: {address}")
    if subject.registration_legal_date:
        click.echo(f"  Data rejestracji: {subject.registration_legal_date}")
    accounts = subject.account_numbers
    if isinstance(accounts, list):
        for account in accounts:
            click.echo(f"  Rachunek: {account}")


@click.command()
@click.version_option(version=__version__, prog_name="check-vat")
@click.argument("nips", nargs=-1, required=True)
@click.option(
    "--date", "-d", "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Data stanu (YYYY-MM-DD), domyślnie dzisiaj",
)
@click.option("--retries", "-r", type=click.IntRange(min=1), help="Liczba prób (nadpisuje VAT_RETRY_COUNT)")
@click.option("--api-url", help="Bazowy URL API (nadpisuje VAT_API_URL)")
@click.option("--json", "as_json", is_flag=True, help="Wynik jako JSON {nip: status}")
@click.option("--details", is_flag=True, help="Pokaż dane podmiotu (tylko dla jednego NIP)")
@click.option("--verbose", "-v", is_flag=True, help="Logi DEBUG")
def cli(
    nips: Tuple[str, ...],
    on_date: Optional[datetime],
    retries: Optional[int],
    api_url: Optional[str],
    as_json: bool,
    details: bool,
    verbose: bool,
):
    """
    Weryfikuje status VAT podatników (NIP) w Białej Liście MF.

    Jeden NIP - zapytanie pojedyncze, kilka - zapytania zbiorcze po 30 NIP.
    """
    if details and len(nips) > 1:
        raise click.UsageError("--details działa tylko dla jednego NIP")

    settings = _build_settings(retries, api_url)

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    query_date = on_date.date() if on_date else None
    logger.debug("check-vat: %d NIP, data: %s", len(nips), query_date or "dzisiaj")

    async def run():
        async with VATVerifier(settings) as verifier:
            if len(nips) == 1:
                nip = nips[0]
                if details:
                    subject = await verifier.fetch_subject(nip, query_date)
                    if subject is None or not subject.status_vat:
                        return {nip: StatusVAT.ERROR}
                    if not as_json:
                        _print_subject(subject)
                    return {nip: subject.status}
                return {nip: await verifier.verify_nip(nip, query_date)}
            return await verifier.verify_nips(nips, query_date)

    try:
        statuses = asyncio.run(run())
    except VATError as e:
        click.secho(f"[ERROR] {e.message}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({nip: status.value for nip, status in statuses.items()}, indent=2))
        return

    for nip, status in statuses.items():
        click.echo(f"Status weryfikacji {nip} ({parse_nip(nip)}) - {status.label}")


if __name__ == "__main__":
    cli()
