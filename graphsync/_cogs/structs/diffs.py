"""
All the functions to calculate the diffs of the values.

Unlike the full-scale diffs (with additions, changes, and removals),
the diffs here are the patches: the minimal values to be sent to the API
on updates, containing only the fields that have actually changed.

The removed fields are never reported: the diff says what to send,
it never instructs to delete anything.

The arrays are never diffed partially: any change of any item, or a change
of the length, makes the whole new array to be sent.

The type discriminators (``@<namespace>.type``) are force-included into
the diffs of the objects where any sibling field has changed, even if
the discriminators themselves have not changed. If nothing else has changed,
the discriminators are not reported (unless they have changed themselves).
"""
import copy
from typing import Optional, Union

from graphsync._cogs.structs import fields, merging, values


def diff(
        old: Union[values.Value, values.Absent],
        new: Union[values.Value, values.Absent],
        options: Optional[merging.UpdateOptions] = None,
) -> Union[values.Value, values.Absent]:
    """
    Calculate the patch to turn the old value into the new one.

    Returns `values.ABSENT` (not an empty object) if nothing has changed,
    so that the update requests can be skipped entirely.
    """
    options = options if options is not None else merging.UpdateOptions()
    match values.kind_of(old), values.kind_of(new):
        case values.Kind.OBJECT, values.Kind.OBJECT:
            changed = {}
            for key, new_value in new.items():  # type: ignore
                old_value = old.get(key, values.ABSENT)  # type: ignore
                patch = diff(old_value, new_value, options)
                if patch is not values.ABSENT:
                    changed[key] = patch
            if not changed:
                return values.ABSENT

            # Keep the new object's order of keys, with the discriminators in their places.
            return {
                key: changed[key] if key in changed else copy.deepcopy(new_value)
                for key, new_value in new.items()  # type: ignore
                if key in changed or fields.is_type_discriminator_field(key)
            }

        case values.Kind.ARRAY, values.Kind.ARRAY:
            if len(old) != len(new) or any(  # type: ignore
                diff(old_item, new_item, options) is not values.ABSENT
                for old_item, new_item in zip(old, new)  # type: ignore
            ):
                return copy.deepcopy(new)
            return values.ABSENT

        case values.Kind.STRING, values.Kind.STRING:
            equal = merging.strings_equal(old, new, ignore_casing=options.ignore_casing)  # type: ignore
            return values.ABSENT if equal else new

        case old_kind, new_kind if old_kind is new_kind:  # nulls, booleans, numbers
            return values.ABSENT if old == new else new

        case _:
            return copy.deepcopy(new)
