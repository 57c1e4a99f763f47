__all__ = [
    "ShopGraphSettings",
    "app_settings",
]

import pathlib
import typing

from django.conf import settings as django_settings

SETTINGS_NAME: str = "SHOPGRAPH"

_DEFAULT_PAYMENTS_FIXTURE: pathlib.Path = pathlib.Path(__file__).parent / "store" / "payments.json"


class DataLoaderSettings(typing.TypedDict):
    """Settings of the dataloaders."""

    # Maximum number of keys fetched by a single call of a batch load function. None means unlimited.
    MAX_BATCH_SIZE: typing.NotRequired[int | None]
    # Seconds to wait before a batch is dispatched. 0 dispatches as soon as the event loop turn is over.
    BATCH_DELAY: typing.NotRequired[float]
    CACHE: typing.NotRequired[bool]


class ListSettings(typing.TypedDict):
    """Settings of the Page."""

    # The maximum number of items which can be returned in a single page.
    MAX_PAGE_SIZE: typing.NotRequired[int]
    DEFAULT_PAGE_SIZE: typing.NotRequired[int]


class PaymentSettings(typing.TypedDict):
    """Settings of the order payments."""

    FIXTURE_PATH: typing.NotRequired[str | pathlib.Path]


class ShopGraphSettings(typing.TypedDict):
    """Settings of the shopgraph app."""

    DATALOADERS: typing.NotRequired[DataLoaderSettings]
    LIST: typing.NotRequired[ListSettings]
    PAYMENTS: typing.NotRequired[PaymentSettings]


class _AppSettingsSection:
    _section: typing.ClassVar[str]

    @property
    def _global_settings(self) -> ShopGraphSettings:
        return getattr(django_settings, SETTINGS_NAME, {})

    @property
    def _settings(self) -> dict[str, typing.Any]:
        return self._global_settings.get(self._section, {})


class AppDataLoaderSettings(_AppSettingsSection):
    _section = "DATALOADERS"

    @property
    def MAX_BATCH_SIZE(self) -> int | None:  # noqa: N802
        return self._settings.get("MAX_BATCH_SIZE", None)

    @property
    def BATCH_DELAY(self) -> float:  # noqa: N802
        return self._settings.get("BATCH_DELAY", 0.0)

    @property
    def CACHE(self) -> bool:  # noqa: N802
        return self._settings.get("CACHE", True)


class AppListSettings(_AppSettingsSection):
    _section = "LIST"

    @property
    def MAX_PAGE_SIZE(self) -> int:  # noqa: N802
        return self._settings.get("MAX_PAGE_SIZE", 100)

    @property
    def DEFAULT_PAGE_SIZE(self) -> int:  # noqa: N802
        return self._settings.get("DEFAULT_PAGE_SIZE", 10)


class AppPaymentSettings(_AppSettingsSection):
    _section = "PAYMENTS"

    @property
    def FIXTURE_PATH(self) -> pathlib.Path:  # noqa: N802
        return pathlib.Path(self._settings.get("FIXTURE_PATH", _DEFAULT_PAYMENTS_FIXTURE))


class AppSettings:
    @property
    def DATALOADERS(self) -> AppDataLoaderSettings:  # noqa: N802
        return AppDataLoaderSettings()

    @property
    def LIST(self) -> AppListSettings:  # noqa: N802
        return AppListSettings()

    @property
    def PAYMENTS(self) -> AppPaymentSettings:  # noqa: N802
        return AppPaymentSettings()


app_settings = AppSettings()
