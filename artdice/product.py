import typing


class MultiCartesianProduct:
    """
    Lazily yields one tuple per combination of items drawn from each of the
    given sequences, one item per sequence.

    Indices advance like an odometer whose first sequence is the fastest
    digit: (a0, b0), (a1, b0), (a0, b1), (a1, b1). The iterator makes a
    single pass; build a new one to enumerate again.
    """

    def __init__(self, sets: typing.Iterable[typing.Sequence]) -> None:
        self.sets = tuple(tuple(s) for s in sets)
        self.indexes = [0] * len(self.sets)
        self.is_complete = any(len(s) == 0 for s in self.sets)

    def __len__(self) -> int:
        result = 1
        for s in self.sets:
            result *= len(s)
        return result

    def __iter__(self) -> "MultiCartesianProduct":
        return self

    def __next__(self) -> tuple:
        if self.is_complete:
            raise StopIteration
        result = tuple(s[i] for s, i in zip(self.sets, self.indexes))
        self._increment()
        return result

    def _increment(self) -> None:
        for position, s in enumerate(self.sets):
            self.indexes[position] = (self.indexes[position] + 1) % len(s)
            if self.indexes[position] != 0:
                return
        # the carry ran off the last sequence
        self.is_complete = True
