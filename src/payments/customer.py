"""Demo customer: fixed profile, created once per process at startup."""

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

import structlog

from shared.countries import HOME_COUNTRY, resolve
from shared.errors import CheckoutError, ConfigurationError

if TYPE_CHECKING:
    from payments.gateway.port import PaymentGateway

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Address:
    address_line_1: str
    address_line_2: str
    city: str
    country: str
    state: str
    zip_code: str


@dataclass(frozen=True)
class Phone:
    country_code: str
    number: str


@dataclass(frozen=True)
class Document:
    document_type: str
    document_number: str


@dataclass(frozen=True)
class CustomerProfile:
    merchant_customer_id: str
    first_name: str
    last_name: str
    email: str
    phone: Phone
    document: Document
    billing_address: Address
    shipping_address: Address
    date_of_birth: str = "1990-02-28"
    gender: str = "MALE"

    def to_payload(self) -> dict:
        payload = asdict(self)
        # date_of_birth and gender only travel with the payer on payments
        payload.pop("date_of_birth")
        payload.pop("gender")
        return payload

    def payer_payload(self, customer_id: str, country: str, home_country: str = HOME_COUNTRY) -> dict:
        """Payer block attached to every payment for ``country``.

        The document follows the payment country, not the stored profile.
        Unknown countries use ``home_country``'s document.
        """
        country_data = resolve(country, home_country)
        billing = {**asdict(self.billing_address), "country": country, "neighborhood": None}
        shipping = {**asdict(self.shipping_address), "country": country, "neighborhood": None}
        return {
            "id": customer_id,
            "merchant_customer_id": self.merchant_customer_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "gender": self.gender,
            "date_of_birth": self.date_of_birth,
            "nationality": country,
            "phone": asdict(self.phone),
            "document": {
                "document_type": country_data.document_type,
                "document_number": country_data.document_number,
            },
            "billing_address": billing,
            "shipping_address": shipping,
        }


_DEMO_ADDRESS = Address(
    address_line_1="Calle 34 # 56 - 78",
    address_line_2="Apartamento 502, Torre I",
    city="Bogota",
    country="CO",
    state="Cundinamarca",
    zip_code="111111",
)

DEMO_CUSTOMER = CustomerProfile(
    merchant_customer_id="customer_001",
    first_name="John",
    last_name="Doe",
    email="customer@example.com",
    phone=Phone(country_code="57", number="3132450765"),
    document=Document(document_type="CC", document_number="1032765432"),
    billing_address=_DEMO_ADDRESS,
    shipping_address=_DEMO_ADDRESS,
)


def provision_customer(gateway: "PaymentGateway", profile: CustomerProfile = DEMO_CUSTOMER) -> str:
    """Create the process-wide demo customer.

    Without a customer id no payment can be attempted, so any failure here
    is raised as ConfigurationError and aborts startup.
    """
    try:
        customer_id = gateway.create_customer(profile)
    except CheckoutError as exc:
        logger.error("customer_provisioning_failed", error=exc.message)
        raise ConfigurationError(f"Could not create demo customer: {exc.message}") from exc

    if not customer_id:
        raise ConfigurationError("Payment provider returned no customer id")

    logger.info("customer_provisioned", customer_id=customer_id)
    return customer_id
