from ._app_settings import ShopGraphSettings

from ._base.dispatch_logger import DispatchLogger, DispatchRecord
from ._base.exceptions import (
    AmbiguousPaymentError,
    DataLoaderContextError,
    DataLoaderError,
    LoaderContractError,
    ObjectNotFoundError,
    PaymentDiscriminationError,
    UnknownPaymentError,
)
from ._base.extensions import DataLoadersExtension
from ._base.types import NodePath, Outcome, path_from_info

from ._dataloaders import (
    AsyncioBatchScheduler,
    BaseDataLoader,
    BatchScheduler,
    DataLoader,
    DataLoaderFactory,
    DataLoaderRegistry,
    DataloadersContext,
    FKDataLoader,
    InfoDataloadersContextMixin,
    ManualBatchScheduler,
    PKDataLoader,
    get_registry,
)

from ._list.graphql import PageInfoType, PageInput
from ._list.page import Page

from ._scalars import DateTime
