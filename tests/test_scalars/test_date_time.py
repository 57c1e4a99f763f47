import datetime

import pytest
import strawberry

from shopgraph import DateTime


@strawberry.type
class Query:
    @strawberry.field
    def echo(self, value: DateTime) -> DateTime:
        return value

    @strawberry.field
    def naive(self) -> DateTime:
        return datetime.datetime(2024, 3, 1, 12, 30)  # noqa: DTZ001

    @strawberry.field
    def prague(self) -> DateTime:
        return datetime.datetime(2024, 3, 1, 13, 30, 0, 250_000, tzinfo=datetime.timezone(datetime.timedelta(hours=1)))


schema = strawberry.Schema(query=Query)


def test_serialize_naive_as_utc() -> None:
    result = schema.execute_sync("{ naive }")
    assert result.errors is None
    assert result.data == {"naive": "2024-03-01T12:30:00.000Z"}


def test_serialize_converts_to_utc() -> None:
    result = schema.execute_sync("{ prague }")
    assert result.errors is None
    assert result.data == {"prague": "2024-03-01T12:30:00.250Z"}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        pytest.param("2024-03-01T12:30:00Z", "2024-03-01T12:30:00.000Z", id="utc"),
        pytest.param("2024-03-01T14:30:00+02:00", "2024-03-01T12:30:00.000Z", id="offset"),
        pytest.param("2024-03-01T12:30:00", "2024-03-01T12:30:00.000Z", id="naive"),
        pytest.param(1709296200000, "2024-03-01T12:30:00.000Z", id="epoch-ms"),
    ],
)
def test_parse_variable(value: str | int, expected: str) -> None:
    result = schema.execute_sync("query ($v: DateTime!) { echo(value: $v) }", variable_values={"v": value})
    assert result.errors is None
    assert result.data == {"echo": expected}


@pytest.mark.parametrize(
    "value",
    [
        pytest.param("yesterday", id="not-iso"),
        pytest.param(True, id="bool"),
        pytest.param(1.5, id="float"),
    ],
)
def test_parse_invalid_variable(value: object) -> None:
    result = schema.execute_sync("query ($v: DateTime!) { echo(value: $v) }", variable_values={"v": value})
    assert result.errors
    assert result.data is None
