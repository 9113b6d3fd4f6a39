"""Country lookup: currency and the local document used for the demo payer.

Explicit table lookup only. Unknown codes resolve to the home country, which
callers pass in from configuration (`CO` when they do not).
"""

from dataclasses import dataclass

HOME_COUNTRY = "CO"


@dataclass(frozen=True)
class CountryData:
    currency: str
    document_type: str
    document_number: str


_COUNTRIES: dict[str, CountryData] = {
    "AR": CountryData(currency="ARS", document_type="DNI", document_number="38799992"),
    "BR": CountryData(currency="BRL", document_type="CPF", document_number="35104075397"),
    "CL": CountryData(currency="CLP", document_type="RUT", document_number="111111111"),
    "CO": CountryData(currency="COP", document_type="CC", document_number="1032765432"),
    "EC": CountryData(currency="USD", document_type="CI", document_number="1710034065"),
    "MX": CountryData(currency="MXN", document_type="CURP", document_number="HEGG560427MVZRRL04"),
    "PE": CountryData(currency="PEN", document_type="DNI", document_number="71936151"),
    "US": CountryData(currency="USD", document_type="SSN", document_number="123456789"),
    "UY": CountryData(currency="UYU", document_type="CI", document_number="19876543"),
}


def resolve(country_code: str | None, home: str = HOME_COUNTRY) -> CountryData:
    """Return the currency and document metadata for ``country_code``.

    Lookup is case-insensitive; an unknown or empty code falls back to
    the ``home`` country's entry, which must itself be in the table.
    """
    code = (country_code or "").strip().upper()
    return _COUNTRIES.get(code, _COUNTRIES[home.upper()])


def is_supported(country_code: str | None) -> bool:
    return (country_code or "").strip().upper() in _COUNTRIES


def supported_countries() -> list[str]:
    return sorted(_COUNTRIES)
