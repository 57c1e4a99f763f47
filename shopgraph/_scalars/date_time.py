import datetime
import typing

import strawberry

__all__ = ("DateTime",)


def _serialize(value: typing.Any) -> str:  # noqa: ANN401
    if not isinstance(value, datetime.datetime):
        raise TypeError(f"DateTime cannot represent a value of type `{type(value).__name__}`.")
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.UTC)
    value = value.astimezone(datetime.UTC)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_value(value: typing.Any) -> datetime.datetime:  # noqa: ANN401
    if isinstance(value, bool):
        raise TypeError("DateTime cannot represent a boolean.")
    if isinstance(value, int):
        # milliseconds since the epoch
        return datetime.datetime.fromtimestamp(value / 1000, tz=datetime.UTC)
    if isinstance(value, str):
        try:
            parsed = datetime.datetime.fromisoformat(value)
        except ValueError as e:
            raise ValueError(f"`{value}` is not a valid ISO 8601 date-time.") from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=datetime.UTC)
        return parsed
    raise TypeError(f"DateTime cannot represent a value of type `{type(value).__name__}`.")


DateTime = strawberry.scalar(
    typing.NewType("DateTime", datetime.datetime),
    name="DateTime",
    serialize=_serialize,
    parse_value=_parse_value,
    description="A date-time in UTC, serialized as an ISO 8601 string. "
    "Accepts ISO 8601 strings or milliseconds since the epoch.",
)
