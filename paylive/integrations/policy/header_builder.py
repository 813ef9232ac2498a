from __future__ import annotations

from typing import Callable

from paylive.integrations.contracts.interfaces import PaymentHeader
from paylive.utils.config_loader import ConfigurationError, PayliveSettings

HeaderFactory = Callable[[], PaymentHeader]

_REQUIRED_FIELDS = ("api_version", "merchant_email", "merchant_key", "service_type")


def build_payment_header(settings: PayliveSettings) -> PaymentHeader:
    """Build a fresh PaymentHeader from the merchant settings. No I/O."""
    missing = [name for name in _REQUIRED_FIELDS if not getattr(settings, name, None)]
    if missing:
        raise ConfigurationError(f"PayLIVE header incomplete; missing: {', '.join(missing)}")

    return PaymentHeader(
        api_version=settings.api_version,
        merchant_email=settings.merchant_email,
        merchant_key=settings.merchant_key,
        service_type=settings.service_type,
        integration_mode=bool(settings.integration_mode),
    )


def header_factory_for(settings: PayliveSettings) -> HeaderFactory:
    """Return a callable that builds a new header on every invocation."""

    def _factory() -> PaymentHeader:
        return build_payment_header(settings)

    return _factory
