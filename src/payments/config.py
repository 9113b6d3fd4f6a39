"""Startup configuration for the storefront backend.

Settings are read from the environment exactly once, at process start, and
passed around explicitly (FastAPI lifespan → ``StoreContext``). A ``.env``
file in the working directory is honoured.

Required:
    ACCOUNT_CODE, PUBLIC_API_KEY, PRIVATE_SECRET_KEY

Optional:
    PORT (8080), ENVIRONMENT (development), DEFAULT_COUNTRY (CO, used for
    requests without a country and as the fallback for unknown codes),
    PROVIDER_TIMEOUT_SECONDS (15), RATE_LIMIT_MAX_REQUESTS (100),
    RATE_LIMIT_WINDOW_SECONDS (900), PAYMENT_RATE_LIMIT_MAX_REQUESTS (10),
    PAYMENT_RATE_LIMIT_WINDOW_SECONDS (300)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

from shared.countries import is_supported, supported_countries
from shared.errors import ConfigurationError

# Public key prefix → provider API host suffix
_KEY_PREFIX_TO_ENVIRONMENT_SUFFIX = {
    "dev": "-dev",
    "staging": "-staging",
    "sandbox": "-sandbox",
    "prod": "",
}

_BASE_API_URL = "https://api{suffix}.y.uno"

_REQUIRED = ("ACCOUNT_CODE", "PUBLIC_API_KEY", "PRIVATE_SECRET_KEY")


def base_url_for_public_key(public_api_key: str) -> str:
    """Derive the provider API base URL from the public key's prefix.

    ``sandbox_gAAAA...`` → ``https://api-sandbox.y.uno``
    """
    prefix = public_api_key.split("_", 1)[0]
    if prefix not in _KEY_PREFIX_TO_ENVIRONMENT_SUFFIX:
        raise ConfigurationError(
            f"Unrecognised public API key prefix {prefix!r}; "
            f"expected one of {sorted(_KEY_PREFIX_TO_ENVIRONMENT_SUFFIX)}"
        )
    return _BASE_API_URL.format(suffix=_KEY_PREFIX_TO_ENVIRONMENT_SUFFIX[prefix])


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    account_code: str
    public_api_key: str
    private_secret_key: str
    port: int = 8080
    environment: str = "development"
    default_country: str = "CO"
    provider_timeout_seconds: float = 15.0
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60
    payment_rate_limit_max_requests: int = 10
    payment_rate_limit_window_seconds: int = 5 * 60
    version: str = "1.0.0"

    @property
    def api_base_url(self) -> str:
        return base_url_for_public_key(self.public_api_key)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def public_environment(self) -> str:
        """Environment name exposed to the browser alongside the public key."""
        return "production" if self.is_production else "sandbox"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``env`` (defaults to ``os.environ`` plus ``.env``).

        Raises ConfigurationError when a required variable is missing or the
        public key prefix does not map to a provider environment.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        missing = [name for name in _REQUIRED if not env.get(name)]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        settings = cls(
            account_code=env["ACCOUNT_CODE"],
            public_api_key=env["PUBLIC_API_KEY"],
            private_secret_key=env["PRIVATE_SECRET_KEY"],
            port=_int(env, "PORT", 8080),
            environment=(env.get("ENVIRONMENT") or "development").lower(),
            default_country=(env.get("DEFAULT_COUNTRY") or "CO").upper(),
            provider_timeout_seconds=_float(env, "PROVIDER_TIMEOUT_SECONDS", 15.0),
            rate_limit_max_requests=_int(env, "RATE_LIMIT_MAX_REQUESTS", 100),
            rate_limit_window_seconds=_int(env, "RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
            payment_rate_limit_max_requests=_int(env, "PAYMENT_RATE_LIMIT_MAX_REQUESTS", 10),
            payment_rate_limit_window_seconds=_int(env, "PAYMENT_RATE_LIMIT_WINDOW_SECONDS", 5 * 60),
        )
        if not is_supported(settings.default_country):
            raise ConfigurationError(
                f"DEFAULT_COUNTRY must be one of {', '.join(supported_countries())}, got {settings.default_country!r}"
            )
        # Fail fast on an unusable key rather than on the first request
        settings.api_base_url  # noqa: B018
        return settings

    def __repr__(self) -> str:
        # Keys stay out of logs and tracebacks
        return f"Settings(account_code={self.account_code!r}, environment={self.environment!r}, port={self.port})"
