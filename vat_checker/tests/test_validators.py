"""
Testy walidacji NIP, podziału na paczki i daty zapytania.
"""

import math
from datetime import date, datetime, timedelta

import pytest

from vat_checker.exceptions import VATError
from vat_checker.tests.helpers import CZYNNY_NIP, NIEZNANY_NIP, valid_nips
from vat_checker.validators import (
    format_nip,
    is_valid_nip,
    nip_portions,
    parse_nip,
    partition_nips,
    resolve_date,
    split_nips,
)


class TestParseNIP:
    """Czyszczenie NIP."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("692-00-00-013", "6920000013"),
            (" 692-00-00-013\t", "6920000013"),
            ("\r\n6920000013\n", "6920000013"),
            ("692-000-00-13", "6920000013"),
            ("12345", "12345"),
            ("", ""),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_nip(raw) == expected

    def test_inner_spaces_kept(self):
        # Tylko brzegi są obcinane
        assert parse_nip("692 000 00 13") == "692 000 00 13"

    @pytest.mark.parametrize("raw", [" 692-00-00-013\t", "--1-2-3--", "\t\n", "PL 6920000013 "])
    def test_idempotent(self, raw):
        assert parse_nip(parse_nip(raw)) == parse_nip(raw)


class TestIsValidNIP:
    """Format i suma kontrolna."""

    @pytest.mark.parametrize("nip", ["6920000013", "5260250995", "3751784446"])
    def test_valid(self, nip):
        assert is_valid_nip(nip)

    @pytest.mark.parametrize(
        "nip",
        [
            "9990000013",   # zła suma kontrolna
            "1122334455",
            "1234567890",
            "1234567891",   # reszta 10
            "12345",
            "69200000130",
            "692-00-00-013",  # nieoczyszczony
            "abcdefghij",
            "",
        ],
    )
    def test_invalid(self, nip):
        assert not is_valid_nip(nip)

    def test_non_ascii_digits_rejected(self):
        # Cyfry arabsko-indyjskie to też \d w re - muszą odpaść
        assert not is_valid_nip("٦٩٢٠٠٠٠٠١٣")

    def test_generated_nips_are_valid(self):
        assert all(is_valid_nip(n) for n in valid_nips(50))


class TestSplitNIPs:
    """Podział na poprawne i niepoprawne."""

    def test_split(self):
        good, bad = split_nips({
            "692-00-00-013": "6920000013",
            "1122334455": "1122334455",
            "12345": "12345",
        })
        assert good == {"692-00-00-013": "6920000013"}
        assert bad == {"1122334455": "1122334455", "12345": "12345"}

    def test_partition_keeps_every_raw_key(self):
        raw = [CZYNNY_NIP, " 6920000013 ", NIEZNANY_NIP, "9990000013", "abc", ""]
        good, bad = partition_nips(raw)

        assert len(good) + len(bad) == len(raw)
        assert set(good) | set(bad) == set(raw)
        assert not set(good) & set(bad)
        assert good[CZYNNY_NIP] == good[" 6920000013 "] == "6920000013"


class TestNIPPortions:
    """Paczki po 30 NIP-ów."""

    @pytest.mark.parametrize("count", [1, 29, 30, 31, 60, 61, 95])
    def test_portion_sizes(self, count):
        nips = valid_nips(count)
        portions = nip_portions(nips)

        assert len(portions) == math.ceil(count / 30)
        assert all(0 < len(p) <= 30 for p in portions)
        flat = [n for p in portions for n in p]
        assert sorted(flat) == sorted(nips)

    def test_empty(self):
        assert nip_portions([]) == []

    def test_duplicates_sent_once(self):
        assert nip_portions(["6920000013", "5260250995", "6920000013"]) == [["6920000013", "5260250995"]]

    def test_custom_size(self):
        assert nip_portions(["1", "2", "3"], size=2) == [["1", "2"], ["3"]]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            nip_portions(["1"], size=0)


class TestResolveDate:
    """Data zapytania."""

    def test_default_today(self):
        assert resolve_date() == date.today().isoformat()

    def test_date(self):
        assert resolve_date(date(2020, 9, 27)) == "2020-09-27"

    def test_datetime(self):
        assert resolve_date(datetime(2020, 9, 27, 23, 59)) == "2020-09-27"

    def test_string(self):
        assert resolve_date("2020-09-27") == "2020-09-27"

    def test_future_date_passes_locally(self):
        # Datę z przyszłości odrzuca dopiero rejestr
        tomorrow = date.today() + timedelta(days=1)
        assert resolve_date(tomorrow) == tomorrow.isoformat()

    @pytest.mark.parametrize("value", ["27-09-2020", "2020-9-27", "2020-02-30", "2020-09-27T10:00", "", "jutro"])
    def test_wrong_string(self, value):
        with pytest.raises(VATError) as exc_info:
            resolve_date(value)
        assert exc_info.value.permanent

    @pytest.mark.parametrize("value", [20200927, 1.5, ["2020-09-27"]])
    def test_wrong_type(self, value):
        with pytest.raises(VATError) as exc_info:
            resolve_date(value)
        assert exc_info.value.is_permanent


def test_format_nip():
    assert format_nip("6920000013") == "692-000-00-13"
    assert format_nip(" 692-00-00-013 ") == "692-000-00-13"
    assert format_nip("12345") is None
    assert format_nip(None) is None
