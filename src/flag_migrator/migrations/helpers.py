"""Helpers shared by the flag shape converters.

Every helper reports problems as MalformedFlagError so that callers always
learn which flag and which field could not be read.
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..errors import MalformedFlagError

ModelT = TypeVar('ModelT', bound=BaseModel)


def field_path(loc: Sequence[Any]) -> str:
    """Render a location tuple as a dotted path, e.g. targeting[1].percentage."""
    path = ""
    for part in loc:
        # bool is an int subclass, but only real ints are list indices
        if isinstance(part, int) and not isinstance(part, bool):
            path += f"[{part}]"
        elif part == "[key]":
            path += "[key]"
        else:
            path += f".{part}" if path else str(part)
    return path


def build(model_cls: Type[ModelT], payload: Dict[str, Any], flag_name: str) -> ModelT:
    """Validate a payload into a model, reporting the first failing field."""
    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        error = e.errors()[0]
        raise MalformedFlagError(flag_name, field_path(error['loc']) or '<flag>', error['msg']) from e


def require_mapping(value: Any, flag_name: str, field: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedFlagError(flag_name, field, f"expected a mapping, got {type(value).__name__}")
    return value


def require_list(value: Any, flag_name: str, field: str) -> List[Any]:
    if not isinstance(value, list):
        raise MalformedFlagError(flag_name, field, f"expected a list, got {type(value).__name__}")
    return value


def coerce_number(value: Any, flag_name: str, field: str) -> float:
    # bool is an int subclass but never a valid percentage
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedFlagError(flag_name, field, f"expected a number, got {type(value).__name__}")
    return float(value)


def coerce_version(value: Any, flag_name: str, field: str = 'version') -> Optional[Union[int, str]]:
    """
    Read a flag content version.

    Integers and strings are kept as they are. Floats come from unquoted
    versions such as `version: 1.5` and are kept as their text.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise MalformedFlagError(flag_name, field, "expected an integer or a string, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return str(value)
    raise MalformedFlagError(
        flag_name, field, f"expected an integer or a string, got {type(value).__name__}"
    )


def stringify_keys(value: Any) -> Any:
    """
    Turn scalar mapping keys into strings, in nested mappings and lists too.

    YAML 1.1 parsers read unquoted keys such as `true:` or `1:` as booleans
    and numbers. Booleans become the lowercase `true`/`false` field names.
    """
    if isinstance(value, dict):
        return {_key_text(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_keys(item) for item in value]
    return value


def _key_text(key: Any) -> str:
    if isinstance(key, bool):
        return str(key).lower()
    return key if isinstance(key, str) else str(key)


def unknown_keys(record: Dict[str, Any], known: Sequence[str], prefix: str = "") -> List[str]:
    """Return one warning per key that the converter does not read."""
    return [
        f"ignored unknown field '{prefix}{key}'"
        for key in record
        if key not in known
    ]
