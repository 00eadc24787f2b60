from collections import OrderedDict as OD
from typing import Any, Generic, Iterable, Iterator, Protocol, TypeVar, overload
from itertools import islice
from .exceptions_warnings import DuplicateEntityError, EntityNotFound


### Ordered Dict with ILoc functionality

_KT = TypeVar("_KT")
_VT = TypeVar("_VT")


class OrderedDict(OD[_KT, _VT]):
    """OrderedDict with iLoc functionality."""

    def __init__(self, *args, **kwargs) -> None:
        self.iloc: _iLocIndexer[_KT, _VT] = _iLocIndexer(self)
        super().__init__(*args, **kwargs)


class _iLocIndexer(Generic[_KT, _VT]):

    def __init__(self, target: OrderedDict[_KT, _VT]) -> None:
        self.target = target

    @overload
    def __getitem__(self, key: int) -> tuple[_KT, _VT]: ...

    @overload
    def __getitem__(self, key: slice) -> list[tuple[_KT, _VT]]: ...

    def __getitem__(
        self, key: int | slice
    ) -> list[tuple[_KT, _VT]] | tuple[_KT, _VT]:

        dict_len = len(self.target)

        if isinstance(key, int):
            # convert negative indices to positive indices
            index = dict_len + key if key < 0 else key
            if not 0 <= index < dict_len:
                raise IndexError("OrderedDict index out of range")
            return next(islice(self.target.items(), index, None))
        if isinstance(key, slice):
            return list(self.target.items())[key]
        raise TypeError("key must be of type int or slice.")


### Key-unique, insertion-ordered collection of named entities


class _Named(Protocol):
    @property
    def name(self) -> str: ...


class KeyedList[T: _Named]:
    """Insertion-ordered collection of entities that are unique by their name.

    Names are compared case-insensitively unless case_sensitive is set. Entities
    can be accessed by name or by position.
    """

    def __init__(self, case_sensitive: bool = False, items: Iterable[T] = ()) -> None:
        """
        Args:
            case_sensitive (bool, optional): Whether names are compared
                case-sensitively. Defaults to False.
            items (Iterable[T], optional): Entities to add initially. Defaults to ().
        """
        self._case_sensitive = case_sensitive
        self._data: OrderedDict[str, T] = OrderedDict()
        for item in items:
            self.insert(item)

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    def normalize(self, name: str) -> str:
        """Get the lookup key for a name under the active comparison policy."""
        return name if self._case_sensitive else name.casefold()

    @overload
    def __getitem__(self, key: int) -> T: ...
    @overload
    def __getitem__(self, key: str) -> T: ...

    def __getitem__(self, key: int | str) -> T:
        if isinstance(key, int):
            return self._data.iloc[key][1]
        try:
            return self._data[self.normalize(key)]
        except KeyError:
            raise EntityNotFound(f"'{key}' doesn't exist.") from None

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            return self.normalize(key) in self._data
        return any(item is key for item in self._data.values())

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._data.values()))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.names()!r})"

    def get(self, key: str, default: Any = None) -> T | Any:
        return self._data.get(self.normalize(key), default)

    def names(self) -> list[str]:
        """Names of all entities in order."""
        return [item.name for item in self._data.values()]

    def index(self, key: str) -> int:
        """Position of the entity with the given name.

        Raises:
            EntityNotFound: If no entity has that name.
        """
        normalized = self.normalize(key)
        for i, existing in enumerate(self._data):
            if existing == normalized:
                return i
        raise EntityNotFound(f"'{key}' doesn't exist.")

    def insert(self, item: T, index: int | None = None) -> T:
        """Add an entity.

        Args:
            item (T): The entity to add.
            index (int | None, optional): Position to insert at. Appends if None or
                beyond the end. Defaults to None.

        Raises:
            DuplicateEntityError: If an entity with an equal name exists already.
                The collection stays unchanged.

        Returns:
            T: The added entity.
        """
        normalized = self.normalize(item.name)
        if normalized in self._data:
            raise DuplicateEntityError(f"'{item.name}' already exists.", key=item.name)

        self._data[normalized] = item
        if index is not None and index < len(self._data) - 1:
            if index < 0:
                index = max(len(self._data) - 1 + index, 0)
            # move everything that was at or behind index to the end
            for key in list(self._data)[index:-1]:
                self._data.move_to_end(key)
        return item

    def pop(self, key: str) -> T:
        """Remove and return the entity with the given name.

        Raises:
            EntityNotFound: If no entity has that name.
        """
        try:
            return self._data.pop(self.normalize(key))
        except KeyError:
            raise EntityNotFound(f"'{key}' doesn't exist.") from None
