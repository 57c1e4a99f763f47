from django.urls import path

from shopgraph.store.schema import schema
from shopgraph.store.views import ShopGraphQLView

urlpatterns = [
    path("graphql/", ShopGraphQLView.as_view(schema=schema)),
]
