# backend/navigation/exceptions.py


class NavigationError(Exception):
    """Base class for errors surfaced to API callers."""


class NavigationItemNotFound(NavigationError):
    def __init__(self, item_id):
        super().__init__(f"Navigation item not found: {item_id}")
        self.item_id = item_id


class NavigationTreeNotFound(NavigationError):
    def __init__(self, tree_id):
        super().__init__(f"Navigation tree not found: {tree_id}")
        self.tree_id = tree_id


class NavigationValidationError(NavigationError):
    """
    Malformed input. `errors` keeps the structured detail (DRF style
    dict/list) when it came from a serializer.
    """

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def from_serializer_errors(cls, errors):
        return cls(_flatten_errors(errors), errors=errors)


class InvalidPaginationArguments(NavigationError):
    pass


def _flatten_errors(errors, prefix=""):
    """
    {"content": [{}, {"language": ["This field may not be blank."]}]}
    -> "content.1.language: This field may not be blank."
    """
    messages = []
    if isinstance(errors, dict):
        for key, value in errors.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if key == "non_field_errors":
                path = prefix
            messages.append(_flatten_errors(value, path))
    elif isinstance(errors, list):
        if all(isinstance(e, str) for e in errors):
            text = " ".join(str(e) for e in errors)
            messages.append(f"{prefix}: {text}" if prefix else text)
        else:
            for index, value in enumerate(errors):
                path = f"{prefix}.{index}" if prefix else str(index)
                messages.append(_flatten_errors(value, path))
    else:
        messages.append(f"{prefix}: {errors}" if prefix else str(errors))
    return "; ".join(m for m in messages if m)
