"""Runtime settings for the storefront.

Values come from the ``[custom]`` table of ``domain.toml`` and can be
overridden per deployment with environment variables of the same name in
upper case (``TAX_RATE_BPS=1800``). Payment credentials are only ever read
from the environment.
"""

import os
from dataclasses import dataclass, fields

import structlog
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

_ENV_ALIASES = {
    "currency": "STOREFRONT_CURRENCY",
}


@dataclass(frozen=True)
class Settings:
    currency: str = "INR"
    cart_max_line_quantity: int = 20
    shipping_flat_minor: int = 0
    tax_rate_bps: int = 0
    payment_timeout_minutes: int = 15
    expiry_sweep_interval_seconds: int = 60
    payment_key_id: str = ""
    payment_key_secret: str = ""
    payment_webhook_secret: str = ""
    payment_api_base_url: str = "https://api.razorpay.com/v1"
    payment_http_timeout_seconds: float = 15.0

    @property
    def has_payment_credentials(self) -> bool:
        return bool(self.payment_key_id and self.payment_key_secret)


def _coerce(name: str, raw, default):
    try:
        return type(default)(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid setting", setting=name, value=raw, default=default)
        return default


def get_settings(domain=None) -> Settings:
    """Resolve settings for the given domain (the active one by default)."""
    domain = domain or current_domain
    custom = domain.config.get("custom", {}) or {}

    values = {}
    for field in fields(Settings):
        value = custom.get(field.name, field.default)
        env_name = _ENV_ALIASES.get(field.name, field.name.upper())
        if env_name in os.environ:
            value = os.environ[env_name]
        values[field.name] = _coerce(field.name, value, field.default)

    return Settings(**values)
