from .core import (
    AsyncioBatchScheduler,
    BaseDataLoader,
    BatchScheduler,
    DataLoader,
    DataLoaderFactory,
    DataLoaderRegistry,
    DataloadersContext,
    InfoDataloadersContextMixin,
    ManualBatchScheduler,
    get_registry,
)
from .pk_dataloader import PKDataLoader
from .fk_dataloader import FKDataLoader
