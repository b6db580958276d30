"""
Merging the new values over the old ones, with or without reconciliation.

Both operations walk the old & new values in parallel and produce a new value;
the inputs are never modified, and the results never share the mutable parts
with the inputs, so they can be modified by the callers freely.

* `merge` keeps everything of the old value and lets the new one override
  the matching paths: e.g. for building the locally stored representation
  of a resource after a write, so that the fields never mentioned by the user
  but returned by the server survive.

* `update` does the same, but drops the old-only keys (unless told to keep
  them), and treats the strings differing only by case as unchanged,
  keeping the old casing: e.g. for the APIs that canonicalize the casing
  on the server side, which must not cause the endless updates.
"""
import copy
import dataclasses
from typing import Optional

from graphsync._cogs.structs import values


@dataclasses.dataclass(frozen=True)
class UpdateOptions:

    ignore_missing_property: bool = False
    """
    Keep the keys of the old objects which are absent in the new objects.
    If ``False``, such keys (and the old-only tails of the arrays) are dropped.
    """

    ignore_casing: bool = False
    """
    Treat the strings that differ only by the letter case as equal.
    In that case, the old string (with its original casing) is retained.
    """


def strings_equal(old: str, new: str, *, ignore_casing: bool = False) -> bool:
    return old.casefold() == new.casefold() if ignore_casing else old == new


def merge(
        old: values.Value,
        new: values.Value,
) -> values.Value:
    """
    Merge the new value over the old one.

    Objects are merged key by key, arrays are merged position by position;
    in both cases, nothing of the old value is lost. In all other cases
    (scalars, nulls, or mismatching kinds), the new value wins outright.
    """
    return _combine(old, new, keep_missing=True, ignore_casing=False)


def update(
        old: values.Value,
        new: values.Value,
        options: Optional[UpdateOptions] = None,
) -> values.Value:
    """
    Update the old value with the new one, as configured by the options.

    The same as `merge`, except that the old-only keys are dropped
    unless ``ignore_missing_property`` is set, and that the old strings
    are kept if they differ only by the case and ``ignore_casing`` is set.
    """
    options = options if options is not None else UpdateOptions()
    return _combine(old, new,
                    keep_missing=options.ignore_missing_property,
                    ignore_casing=options.ignore_casing)


def _combine(
        old: values.Value,
        new: values.Value,
        *,
        keep_missing: bool,
        ignore_casing: bool,
) -> values.Value:
    match values.kind_of(old), values.kind_of(new):
        case values.Kind.OBJECT, values.Kind.OBJECT:
            result: values.Object = {}
            for key, old_value in old.items():
                if key in new:
                    result[key] = _combine(old_value, new[key],
                                           keep_missing=keep_missing, ignore_casing=ignore_casing)
                elif keep_missing:
                    result[key] = copy.deepcopy(old_value)
            for key, new_value in new.items():
                if key not in old:
                    result[key] = copy.deepcopy(new_value)
            return result

        case values.Kind.ARRAY, values.Kind.ARRAY:
            items: values.Array = [
                _combine(old_item, new_item, keep_missing=keep_missing, ignore_casing=ignore_casing)
                for old_item, new_item in zip(old, new)
            ]
            items.extend(copy.deepcopy(new[len(old):]))
            if keep_missing:
                items.extend(copy.deepcopy(old[len(new):]))
            return items

        case values.Kind.STRING, values.Kind.STRING:
            return old if strings_equal(old, new, ignore_casing=ignore_casing) else new

        case _:
            return copy.deepcopy(new)
