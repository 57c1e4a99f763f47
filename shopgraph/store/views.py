__all__ = [
    "ShopGraphQLView",
]

import typing

from strawberry.django.views import AsyncGraphQLView

from shopgraph._dataloaders import DataloadersContext

if typing.TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse


class ShopGraphQLView(AsyncGraphQLView):
    """
    Every request gets its own context. The dataloaders of the context are replaced with a fresh set
    for each operation by the schema's `DataLoadersExtension`.
    """

    async def get_context(self, request: "HttpRequest", response: "HttpResponse") -> DataloadersContext:
        return DataloadersContext(request=request, response=response)
