__all__ = [
    "NodePath",
    "Outcome",
    "path_from_info",
]

import dataclasses
import typing

if typing.TYPE_CHECKING:
    import strawberry

NodePath = tuple[str | int, ...]


@dataclasses.dataclass(frozen=True)
class Outcome[R]:
    """
    Result of a single load - either a value or an error - together with the path of the node it belongs to.
    Lets a resolver build a partial response instead of failing the whole field.
    """

    value: R | None = None
    error: BaseException | None = None
    path: NodePath = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> R:
        """Return the value or raise the error."""
        if self.error is not None:
            raise self.error
        return self.value

    def value_or_error(self) -> "R | BaseException":
        """
        Return the value, or the error instance itself.
        A graphql list item that is an exception is reported as an error located at that item.
        """
        return self.value if self.error is None else self.error


def path_from_info(info: "strawberry.Info") -> NodePath:
    """Turn the resolver info path into a tuple, e.g. `("customers", 0, "orders")`."""
    if info.path is None:
        return ()
    return tuple(info.path.as_list())
