"""Path-addressed edits on a page working copy.

Every helper deep-copies the record it is given, applies one change to the
copy and returns it. The input is never touched, so the previous and the next
working state never share nested objects.

Editable addresses form a closed set:

* scalar fields: ``name``, ``slug``
* object fields: ``seo``, ``navigation``, ``welcomeSection``, ``stats``, ``footer``
* top-level arrays: ``videos``
* dot-path arrays: ``gallery.images``, ``locations.cities``

``apply_edit`` validates an edit description against that set before
dispatching to the helpers; the helpers themselves accept any path.
"""
import copy
import logging

logger = logging.getLogger(__name__)

SCALAR_FIELDS = frozenset({'name', 'slug'})
OBJECT_FIELDS = frozenset({'seo', 'navigation', 'welcomeSection', 'stats', 'footer'})
ARRAY_FIELDS = frozenset({'videos'})
NESTED_ARRAY_PATHS = frozenset({'gallery.images', 'locations.cities'})

# Sub-fields allowed inside array items, per array address
ITEM_FIELDS = {
    'videos': frozenset({'src', 'alt', 'startTime'}),
    'gallery.images': frozenset({'src', 'alt'}),
    'locations.cities': frozenset(),
}

# Keys allowed inside object fields
OBJECT_KEYS = {
    'seo': frozenset({'title', 'description'}),
    'navigation': frozenset({'facebookUrl', 'instagramUrl'}),
    'welcomeSection': frozenset({'welcomeText', 'subtitle'}),
    'stats': frozenset({'clientsCount', 'yearsOnMarket', 'smilesCount'}),
    'footer': frozenset({
        'facebookUrl', 'facebookText', 'instagramUrl', 'instagramText', 'phoneNumber',
    }),
}

EDIT_OPS = frozenset({'set', 'setItem', 'append', 'remove'})


class EditError(ValueError):
    """An edit addressed an unknown field or was malformed."""


# ---- path resolution ----

def get_by_path(obj, path):
    """Read a dot-path. Missing keys give None; nothing is created."""
    current = obj
    for key in path.split('.'):
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def _parent_for_write(obj, path):
    """Walk to the dict holding the last key of ``path``, creating missing dicts."""
    keys = path.split('.')
    last = keys.pop()
    parent = obj
    for key in keys:
        if not isinstance(parent.get(key), dict):
            parent[key] = {}
        parent = parent[key]
    return parent, last


def set_by_path(obj, path, value):
    """Write ``value`` at a dot-path, creating missing parent dicts."""
    parent, last = _parent_for_write(obj, path)
    parent[last] = value
    return obj


def _array_at(record, path, create=False):
    if create:
        parent, last = _parent_for_write(record, path)
        if parent.get(last) is None:
            parent[last] = []
        value = parent[last]
    else:
        value = get_by_path(record, path)
    return value if isinstance(value, list) else None


def _in_bounds(items, index):
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(items)


# ---- helpers ----

def set_field(record, field_name, value, sub_field=None):
    """Set ``record[field_name]`` or ``record[field_name][sub_field]``."""
    updated = copy.deepcopy(record)
    if sub_field is not None:
        if not isinstance(updated.get(field_name), dict):
            updated[field_name] = {}
        updated[field_name][sub_field] = copy.deepcopy(value)
    else:
        updated[field_name] = copy.deepcopy(value)
    return updated


def _set_element(updated, items, path, index, value, sub_field):
    if items is None:
        logger.warning(f"Ignoring edit of {path}[{index}]: not an array")
        return updated
    if not _in_bounds(items, index):
        logger.warning(f"Ignoring edit of {path}[{index}]: index out of range (length {len(items)})")
        return updated
    if sub_field is not None:
        if not isinstance(items[index], dict):
            items[index] = {}
        items[index][sub_field] = copy.deepcopy(value)
    else:
        items[index] = copy.deepcopy(value)
    return updated


def set_array_element(record, field_name, index, value, sub_field=None):
    """Set one element (or one key of it) of a top-level array field."""
    updated = copy.deepcopy(record)
    return _set_element(updated, _array_at(updated, field_name), field_name, index, value, sub_field)


def set_nested_array_element(record, path, index, value, sub_field=None):
    """Like ``set_array_element`` for arrays addressed by a dot-path."""
    updated = copy.deepcopy(record)
    return _set_element(updated, _array_at(updated, path), path, index, value, sub_field)


def _append(record, path, default_item):
    updated = copy.deepcopy(record)
    items = _array_at(updated, path, create=True)
    if items is None:
        logger.warning(f"Ignoring append to {path}: not an array")
        return updated
    items.append(copy.deepcopy(default_item))
    return updated


def append_array_item(record, field_name, default_item):
    """Append ``default_item`` to a top-level array, creating it if missing."""
    return _append(record, field_name, default_item)


def append_nested_array_item(record, path, default_item):
    """Append ``default_item`` to the array at a dot-path, creating missing parents."""
    return _append(record, path, default_item)


def _remove(updated, items, path, index):
    if items is None or not _in_bounds(items, index):
        logger.warning(f"Ignoring removal of {path}[{index}]: no such element")
        return updated
    del items[index]
    return updated


def remove_array_item(record, field_name, index):
    """Remove one element of a top-level array; later elements shift down."""
    updated = copy.deepcopy(record)
    return _remove(updated, _array_at(updated, field_name), field_name, index)


def remove_nested_array_item(record, path, index):
    """Remove one element of the array at a dot-path; later elements shift down."""
    updated = copy.deepcopy(record)
    return _remove(updated, _array_at(updated, path), path, index)


# ---- edit descriptions ----

def _check_sub_field(path, sub_field):
    if sub_field is None:
        return
    if sub_field not in ITEM_FIELDS[path]:
        raise EditError(f"Unknown field {sub_field!r} for items of {path}")


def _check_item(path, item):
    """Whole list items: text for cities, objects with known keys otherwise."""
    allowed = ITEM_FIELDS[path]
    if not allowed:
        if not isinstance(item, str):
            raise EditError(f"Items of {path} must be text")
        return
    if not isinstance(item, dict):
        raise EditError(f"Items of {path} must be objects")
    unknown = set(item) - allowed
    if unknown:
        raise EditError(f"Unknown fields {sorted(unknown)} for items of {path}")


def _check_object(path, value, sub_field):
    allowed = OBJECT_KEYS[path]
    if sub_field is not None:
        if sub_field not in allowed:
            raise EditError(f"Unknown field {sub_field!r} for {path}")
        return
    if not isinstance(value, dict):
        raise EditError(f"{path} must be replaced by an object")
    unknown = set(value) - allowed
    if unknown:
        raise EditError(f"Unknown fields {sorted(unknown)} for {path}")


def apply_edit(record, edit):
    """Apply one edit description and return the new working copy.

    An edit is a dict such as::

        {"op": "set", "path": "footer", "subField": "phoneNumber", "value": "+48 600 000 000"}
        {"op": "setItem", "path": "gallery.images", "index": 0, "subField": "alt", "value": "Booth"}
        {"op": "append", "path": "locations.cities", "value": "Sopot"}
        {"op": "remove", "path": "videos", "index": 2}
    """
    if not isinstance(edit, dict):
        raise EditError('Edit must be an object')
    op = edit.get('op')
    path = edit.get('path')
    sub_field = edit.get('subField')
    if op not in EDIT_OPS:
        raise EditError(f"Unknown edit operation {op!r}")
    if not isinstance(path, str):
        raise EditError('Edit path is required')

    if op == 'set':
        if path in SCALAR_FIELDS:
            if sub_field is not None:
                raise EditError(f"{path} has no sub-fields")
            return set_field(record, path, edit.get('value'))
        if path in OBJECT_FIELDS:
            _check_object(path, edit.get('value'), sub_field)
            return set_field(record, path, edit.get('value'), sub_field)
        if path in ARRAY_FIELDS or path in NESTED_ARRAY_PATHS:
            if sub_field is not None or not isinstance(edit.get('value'), list):
                raise EditError(f"{path} must be replaced by a list")
            for item in edit.get('value'):
                _check_item(path, item)
            if path in ARRAY_FIELDS:
                return set_field(record, path, edit.get('value'))
            return set_by_path(copy.deepcopy(record), path, copy.deepcopy(edit.get('value')))
        raise EditError(f"Unknown field {path!r}")

    if path not in ARRAY_FIELDS and path not in NESTED_ARRAY_PATHS:
        raise EditError(f"{path!r} is not an editable list")

    if op == 'append':
        _check_item(path, edit.get('value'))
        if path in ARRAY_FIELDS:
            return append_array_item(record, path, edit.get('value'))
        return append_nested_array_item(record, path, edit.get('value'))

    index = edit.get('index')
    if not isinstance(index, int) or isinstance(index, bool):
        raise EditError('Edit index must be an integer')

    if op == 'setItem':
        _check_sub_field(path, sub_field)
        if sub_field is None:
            _check_item(path, edit.get('value'))
        if path in ARRAY_FIELDS:
            return set_array_element(record, path, index, edit.get('value'), sub_field)
        return set_nested_array_element(record, path, index, edit.get('value'), sub_field)

    if path in ARRAY_FIELDS:
        return remove_array_item(record, path, index)
    return remove_nested_array_item(record, path, index)


def apply_edits(record, edits):
    """Apply a list of edit descriptions in order."""
    if not isinstance(edits, list):
        raise EditError('Edits must be a list')
    for edit in edits:
        record = apply_edit(record, edit)
    return record


class WorkingCopy:
    """Editing state for one page: the last saved snapshot and the current edits.

    There is no undo stack; ``discard`` simply goes back to the saved snapshot.
    """

    def __init__(self, record):
        self.saved = copy.deepcopy(record)
        self.current = copy.deepcopy(record)

    @property
    def dirty(self):
        return self.current != self.saved

    def apply(self, helper, *args, **kwargs):
        """Run an editor helper against the current state and keep its result."""
        self.current = helper(self.current, *args, **kwargs)
        return self.current

    def discard(self):
        self.current = copy.deepcopy(self.saved)
        return self.current

    def mark_saved(self):
        self.saved = copy.deepcopy(self.current)
