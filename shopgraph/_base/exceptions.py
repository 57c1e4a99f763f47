import dataclasses
import typing


class DataLoaderError(Exception):
    """Base class of all dataloader errors."""


@dataclasses.dataclass
class LoaderContractError(DataLoaderError):
    """The batch load function broke its contract (e.g., returned a result of different length)."""

    key_space: str
    message: str

    def __str__(self) -> str:
        return f"Batch load function of `{self.key_space}` {self.message}"


class DataLoaderContextError(DataLoaderError):
    """There is no (open) dataloader registry available for the current request."""


@dataclasses.dataclass
class ObjectNotFoundError(DataLoaderError):
    key_space: str
    key: typing.Hashable

    def __str__(self) -> str:
        return f"`{self.key_space}` has no object with key `{self.key!r}`."


class PaymentDiscriminationError(Exception):
    """The concrete variant of a payment record could not be determined."""


@dataclasses.dataclass
class UnknownPaymentError(PaymentDiscriminationError):
    record: typing.Mapping[str, typing.Any]

    def __str__(self) -> str:
        return f"Payment record `{self.record.get('id')}` does not match any payment variant."


@dataclasses.dataclass
class AmbiguousPaymentError(PaymentDiscriminationError):
    record: typing.Mapping[str, typing.Any]
    candidates: tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"Payment record `{self.record.get('id')}` matches more than one payment variant: "
            f"{', '.join(self.candidates)}."
        )
