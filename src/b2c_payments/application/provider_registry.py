from __future__ import annotations

from typing import TYPE_CHECKING

from b2c_payments.domain.exceptions import (
    ConfigurationError,
    DuplicateProviderError,
    UnsupportedProviderError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from b2c_payments.application.ports import MobileMoneyProvider


class ProviderRegistry:
    """Explicit mapping from provider tag to adapter, built once at startup.

    Tags are normalized to upper case, so lookups are case-insensitive.
    Duplicate or blank tags are configuration errors raised here, never
    at request time, so resolve() needs no tie-break rule.
    """

    def __init__(self, providers: Iterable[MobileMoneyProvider]) -> None:
        self._providers: dict[str, MobileMoneyProvider] = {}
        for provider in providers:
            tag = self._normalize(provider.provider_type)
            if not tag:
                raise ConfigurationError(
                    f"Provider adapter {type(provider).__name__} has a blank provider_type"
                )
            if tag in self._providers:
                raise DuplicateProviderError(
                    f"Provider tag '{tag}' is registered by both "
                    f"{type(self._providers[tag]).__name__} and {type(provider).__name__}"
                )
            self._providers[tag] = provider

    @property
    def provider_types(self) -> tuple[str, ...]:
        """Registered tags in registration order."""
        return tuple(self._providers)

    def resolve(self, provider_tag: str) -> MobileMoneyProvider:
        """Return the adapter registered under provider_tag.

        Raises:
            UnsupportedProviderError: If the tag is blank or not registered.
        """
        provider = self._providers.get(self._normalize(provider_tag))
        if provider is None:
            raise UnsupportedProviderError(f"Unsupported mobile money provider: {provider_tag}")
        return provider

    def __contains__(self, provider_tag: object) -> bool:
        return isinstance(provider_tag, str) and self._normalize(provider_tag) in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    @staticmethod
    def _normalize(provider_tag: str | None) -> str:
        return (provider_tag or "").strip().upper()
