"""
Konfiguracja VAT Checker.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VATCheckerSettings(BaseSettings):
    """Konfiguracja klienta Białej Listy VAT."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Biała Lista VAT
    vat_api_url: str = Field(
        default="https://wl-api.mf.gov.pl",
        description="Bazowy URL API Białej Listy VAT (bez końcowego /)"
    )

    # Retry
    vat_retry_count: int = Field(
        default=5,
        ge=1,
        description="Maksymalna liczba prób dla błędów przejściowych"
    )
    vat_retry_base_delay_sec: float = Field(
        default=1.0,
        ge=0.0,
        description="Pauza przed pierwszym ponowieniem (podwajana co próbę)"
    )

    # HTTP
    vat_request_timeout_sec: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout pojedynczego zapytania HTTP (sekundy)"
    )
    # Udajemy przeglądarkę - API ma niższe limity dla "botów"
    vat_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/85.0.4183.121 Safari/537.36"
        ),
        description="Nagłówek User-Agent"
    )
    vat_accept_language: str = Field(
        default="pl-PL,pl;q=0.9,en-US;q=0.8,en;q=0.7",
        description="Nagłówek Accept-Language"
    )

    # Environment
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def api_base(self) -> str:
        """Bazowy URL bez końcowego ukośnika."""
        return self.vat_api_url.rstrip("/")


@lru_cache
def get_settings() -> VATCheckerSettings:
    """Singleton dla ustawień - cachowane przy pierwszym wywołaniu."""
    return VATCheckerSettings()
