__all__ = (
    "PageInfoType",
    "PageInput",
)

import typing

import strawberry

from shopgraph._app_settings import app_settings

if typing.TYPE_CHECKING:
    from shopgraph._list.page import Page

_MAX_PAGE_NUMBER: int = 999_999_999


@strawberry.type(name="PageInfo", description="Pagination metadata.")
class PageInfoType:
    @strawberry.field(description="Number of items per page.")
    def limit(self: "Page") -> int:
        return self.page_size

    @strawberry.field(description="Current page number.")
    def page(self: "Page") -> int:
        return self.current_page

    @strawberry.field(description="Whether there is a next page.")
    def has_next(self: "Page") -> bool:
        return self.has_next_page

    @strawberry.field(description="Total number of pages.")
    def num_pages(self: "Page") -> int:
        return self.total_pages_count


@strawberry.input
class PageInput:
    limit: int = strawberry.field(
        default=10,
        description="Number of items per page.",
    )
    page: int = strawberry.field(
        default=1,
        description=f"Page number. Minimum value is 1, maximum is {_MAX_PAGE_NUMBER:,}.",
    )

    def __setattr__(
        self,
        key: str,
        value: typing.Any,  # noqa: ANN401
    ) -> None:
        if key == "page":
            value = min(value, _MAX_PAGE_NUMBER)
            value = max(value, 1)
        elif key == "limit":
            value = min(value, app_settings.LIST.MAX_PAGE_SIZE)
            value = max(value, 1)
        super().__setattr__(key, value)

    def __hash__(self) -> int:
        return hash((self.limit, self.page))

    @classmethod
    def default(cls) -> "PageInput":
        return cls(limit=app_settings.LIST.DEFAULT_PAGE_SIZE, page=1)
