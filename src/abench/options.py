import argparse
from typing import Iterator, List


class OptionSet:
    """Append-only, ordered collection of repeatable string options.

    Duplicates are kept; there is no way to remove an entry once set.
    """

    def __init__(self):
        self._values: List[str] = []

    def set(self, value: str) -> None:
        self._values.append(value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __str__(self) -> str:
        return str(self._values)

    def __repr__(self) -> str:
        return f"OptionSet({self._values!r})"


class OptionSetAction(argparse.Action):
    """argparse action that appends each occurrence of a flag to an OptionSet."""

    def __init__(self, option_strings, dest, **kwargs):
        kwargs.setdefault("default", None)
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        option_set = getattr(namespace, self.dest, None)
        if option_set is None:
            option_set = OptionSet()
            setattr(namespace, self.dest, option_set)
        option_set.set(values)
