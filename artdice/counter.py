import typing


class ItemCounter:
    """
    Counts occurrences of hashable, orderable items.

    Two counters compare equal when every item has the same count, no matter
    in which order the items were added. The hash is computed over the items
    in sorted order so it agrees with equality. Like any dictionary key, a
    counter must not be modified after it has been used as one.
    """

    def __init__(self, items: typing.Iterable = ()) -> None:
        self._items: typing.Dict[typing.Any, int] = {}
        for item in items:
            self.add(item)

    def add(self, item) -> None:
        self.add_amount(item, 1)

    def add_amount(self, item, amount: int) -> None:
        if amount < 0:
            raise ValueError("cannot add a negative amount (%s)" % amount)
        if amount == 0:
            return
        self._items[item] = self._items.get(item, 0) + amount

    def get_count(self, item) -> int:
        return self._items.get(item, 0)

    def total_count(self) -> int:
        return sum(self._items.values())

    def items(self) -> typing.List[typing.Tuple[typing.Any, int]]:
        return sorted(self._items.items())

    def __contains__(self, item) -> bool:
        return item in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ItemCounter):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(tuple(self.items()))

    def __repr__(self) -> str:
        return "{%s}" % ", ".join("%s: %s" % (k, v) for k, v in self.items())
