from .dataloaders import BaseDataLoader, DataLoader
from .factories import DataLoaderFactory
from .request_context import DataLoaderRegistry, DataloadersContext, InfoDataloadersContextMixin, get_registry
from .scheduler import AsyncioBatchScheduler, BatchScheduler, ManualBatchScheduler
