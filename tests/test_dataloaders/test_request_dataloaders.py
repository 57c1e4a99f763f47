import dataclasses
import typing

import pytest
import strawberry

from shopgraph import (
    BaseDataLoader,
    DataLoader,
    DataLoaderContextError,
    DataLoaderFactory,
    DataLoaderRegistry,
    DataloadersContext,
    DataLoadersExtension,
    FKDataLoader,
    LoaderContractError,
    ManualBatchScheduler,
    ObjectNotFoundError,
    PKDataLoader,
    get_registry,
)


@dataclasses.dataclass
class Item:
    pk: int
    parent_id: int | None = None


ITEMS = {i: Item(pk=i, parent_id=i % 2) for i in range(1, 7)}


class ItemPKDataLoader(PKDataLoader[int, Item]):
    key_space = "item_by_id"
    calls: typing.ClassVar[list[list[int]]] = []

    async def get_by_ids(self, ids: list[int]) -> list[Item]:
        self.calls.append(ids)
        # reversed on purpose, the loader has to align the results with the keys
        return [ITEMS[i] for i in reversed(ids) if i in ITEMS]


class StrictItemPKDataLoader(ItemPKDataLoader):
    key_space = "strict_item_by_id"
    missing_ok = False


class ItemsByParentFKDataLoader(FKDataLoader[int, list[Item]]):
    key_space = "items_by_parent_id"

    def get_items_map(self, ids: list[int]) -> dict[int, list[Item]]:
        result: dict[int, list[Item]] = {}
        for item in ITEMS.values():
            if item.parent_id in ids:
                result.setdefault(item.parent_id, []).append(item)
        return result


class FirstItemByParentFKDataLoader(ItemsByParentFKDataLoader):
    key_space = "first_item_by_parent_id"
    one_to_one = True


class ClashingDataLoader(BaseDataLoader[int, int]):
    key_space = "item_by_id"

    def load_fn(self, keys: list[int]) -> list[int]:
        return keys


@pytest.fixture()
def scheduler() -> ManualBatchScheduler:
    return ManualBatchScheduler()


@pytest.fixture()
def registry(scheduler: ManualBatchScheduler) -> DataLoaderRegistry:
    return DataLoaderRegistry(scheduler=scheduler)


def test_registry_add_and_lookup(registry: DataLoaderRegistry) -> None:
    loader = DataLoader(lambda keys: keys, scheduler=registry.scheduler)
    registry.add("echo", loader)
    assert registry["echo"] is loader
    assert list(registry) == ["echo"]
    assert len(registry) == 1
    assert registry.get_or_create("echo", lambda: pytest.fail("must not be called")) is loader

    with pytest.raises(DataLoaderContextError):
        registry.add("echo", loader)


async def test_closed_registry(registry: DataLoaderRegistry, scheduler: ManualBatchScheduler) -> None:
    loader = DataLoader(lambda keys: keys, scheduler=scheduler)
    registry.add("echo", loader)
    loader.load(1)
    await scheduler.flush()

    registry.close()
    assert registry.closed
    assert len(registry) == 0
    assert "closed" in repr(registry)
    # cache was dropped
    assert not loader.load(1).done()
    with pytest.raises(DataLoaderContextError):
        registry.add("echo", loader)


def test_get_registry(registry: DataLoaderRegistry) -> None:
    assert get_registry(registry) is registry
    assert get_registry({"dataloaders": registry}) is registry
    context = DataloadersContext(request=None, response=None, dataloaders=registry)
    assert get_registry(context) is registry

    @dataclasses.dataclass
    class FakeInfo:
        context: typing.Any

    assert get_registry(FakeInfo(context=context)) is registry
    assert get_registry(FakeInfo(context={"dataloaders": registry})) is registry

    for source in (None, {}, FakeInfo(context=object()), {"dataloaders": "nope"}):
        with pytest.raises(DataLoaderContextError):
            get_registry(source)


def test_context_gets_own_registry() -> None:
    first = DataloadersContext(request=None, response=None)
    second = DataloadersContext(request=None, response=None)
    assert isinstance(first.dataloaders, DataLoaderRegistry)
    assert first.dataloaders is not second.dataloaders


def test_base_dataloader_is_singleton_per_registry(registry: DataLoaderRegistry) -> None:
    loader = ItemPKDataLoader(registry)
    assert ItemPKDataLoader(registry) is loader
    assert registry["item_by_id"] is loader
    assert loader.name == "item_by_id"

    other = DataLoaderRegistry(scheduler=ManualBatchScheduler())
    assert ItemPKDataLoader(other) is not loader


def test_base_dataloader_key_space_clash(registry: DataLoaderRegistry) -> None:
    ItemPKDataLoader(registry)
    with pytest.raises(DataLoaderContextError, match="item_by_id"):
        ClashingDataLoader(registry)


def test_key_space_defaults_to_class_name() -> None:
    class EchoDataLoader(BaseDataLoader[int, int]):
        def load_fn(self, keys: list[int]) -> list[int]:
            return keys

    assert EchoDataLoader.get_key_space() == "EchoDataLoader"


@pytest.mark.parametrize(
    ("setting", "expected"),
    [
        pytest.param(None, None, id="unlimited"),
        pytest.param(3, 3, id="limited"),
    ],
)
def test_base_dataloader_options_from_settings(
    settings: typing.Any,
    registry: DataLoaderRegistry,
    setting: int | None,
    expected: int | None,
) -> None:
    settings.SHOPGRAPH = {"DATALOADERS": {"MAX_BATCH_SIZE": setting, "CACHE": False}}
    loader = ItemsByParentFKDataLoader(registry)
    assert loader.max_batch_size == expected
    assert loader.cache is False


async def test_pk_dataloader_aligns_results(registry: DataLoaderRegistry, scheduler: ManualBatchScheduler) -> None:
    ItemPKDataLoader.calls.clear()
    loader = ItemPKDataLoader(registry)
    result = loader.load_many([3, 1, 42, 3])
    await scheduler.flush()
    assert await result == [ITEMS[3], ITEMS[1], None, ITEMS[3]]
    assert ItemPKDataLoader.calls == [[3, 1, 42]]


async def test_pk_dataloader_missing_not_ok(registry: DataLoaderRegistry, scheduler: ManualBatchScheduler) -> None:
    loader = StrictItemPKDataLoader(registry)
    found, missing = loader.load(2), loader.load(42)
    await scheduler.flush()
    assert await found == ITEMS[2]
    with pytest.raises(ObjectNotFoundError) as e:
        await missing
    assert e.value.key == 42
    assert e.value.key_space == "strict_item_by_id"
    assert str(e.value) == "`strict_item_by_id` has no object with key `42`."


async def test_fk_dataloader(registry: DataLoaderRegistry, scheduler: ManualBatchScheduler) -> None:
    loader = ItemsByParentFKDataLoader(registry)
    result = loader.load_many([0, 1, 99])
    await scheduler.flush()
    even, odd, none = await result
    assert [i.pk for i in even] == [2, 4, 6]
    assert [i.pk for i in odd] == [1, 3, 5]
    assert none == []


async def test_fk_dataloader_one_to_one(registry: DataLoaderRegistry, scheduler: ManualBatchScheduler) -> None:
    loader = FirstItemByParentFKDataLoader(registry)
    result = loader.load_many([1, 99])
    await scheduler.flush()
    assert await result == [ITEMS[1], None]


async def test_fk_dataloader_requires_mapping(registry: DataLoaderRegistry, scheduler: ManualBatchScheduler) -> None:
    class BrokenItemsFKDataLoader(FKDataLoader[int, list[Item]]):
        key_space = "broken_items_by_parent_id"

        def get_items_map(self, ids: list[int]) -> list[Item]:
            return list(ITEMS.values())

    loader = BrokenItemsFKDataLoader(registry)
    result = loader.load(1)
    await scheduler.flush()
    with pytest.raises(LoaderContractError, match="must return a mapping") as e:
        await result
    assert e.value.key_space == "broken_items_by_parent_id"


def test_factory_key_spaces() -> None:
    factory = DataLoaderFactory(ItemPKDataLoader)
    factory.register("square", lambda keys: [k * k for k in keys], max_batch_size=10)
    assert factory.key_spaces == ["item_by_id", "square"]

    with pytest.raises(ValueError):
        factory.register("item_by_id", lambda keys: keys)
    with pytest.raises(ValueError):
        factory.register_class(ClashingDataLoader)


async def test_factory_creates_isolated_registries() -> None:
    factory = DataLoaderFactory(ItemPKDataLoader, scheduler_factory=ManualBatchScheduler)
    factory.register("square", lambda keys: [k * k for k in keys], max_batch_size=10)

    first, second = factory.create(), factory.create()
    assert first is not second
    assert set(first) == set(second) == {"item_by_id", "square"}
    assert first["square"] is not second["square"]
    assert first.scheduler is not second.scheduler
    assert first["square"].max_batch_size == 10

    first["square"].prime(3, -1)
    future = second["square"].load(3)
    await second.scheduler.flush()
    assert await future == 9
    assert await first["square"].load(3) == -1


@strawberry.type
class Query:
    @strawberry.field
    async def item_parents(self, info: strawberry.Info, ids: list[int]) -> list[int | None]:
        items = await ItemPKDataLoader(info).load_many(ids)
        return [item.parent_id if item else None for item in items]

    @strawberry.field
    def registry_id(self, info: strawberry.Info) -> str:
        return str(id(get_registry(info)))


schema = strawberry.Schema(
    query=Query,
    extensions=[DataLoadersExtension.for_factory(DataLoaderFactory(ItemPKDataLoader))],
)


async def test_extension_gives_each_operation_a_fresh_registry() -> None:
    context = DataloadersContext(request=None, response=None)
    view_registry = context.dataloaders

    result = await schema.execute("{ registryId itemParents(ids: [1, 2, 42]) }", context_value=context)
    assert result.errors is None
    assert result.data["itemParents"] == [1, 0, None]
    assert result.data["registryId"] != str(id(view_registry))
    # the operation is over, its registry was closed
    assert context.dataloaders.closed


async def test_extension_with_dict_context() -> None:
    context: dict = {}
    result = await schema.execute("{ itemParents(ids: [3]) }", context_value=context)
    assert result.errors is None
    assert result.data == {"itemParents": [1]}
    assert context["dataloaders"].closed



async def test_extension_without_context() -> None:
    result = await schema.execute("{ itemParents(ids: [4, 5]) }")
    assert result.errors is None
    assert result.data == {"itemParents": [0, 1]}
