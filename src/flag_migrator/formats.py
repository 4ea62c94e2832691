# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Decoding and encoding of flag files in TOML, JSON and YAML.

Decoding is strict about the format tag: anything other than toml, json or
yaml is rejected before the input is looked at. Encoding is permissive: an
unknown or empty tag produces YAML.
"""

import json
import math
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Union

import tomli
import tomlkit
import yaml

from .errors import DecodeError, EncodeError, UnsupportedFormat
from .models import CanonicalFlag


class Format(str, Enum):
    """Supported flag file formats."""
    TOML = "toml"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def parse(cls, tag: Union["Format", str, None]) -> "Format":
        """
        Resolve an input format tag (case-insensitive).

        Raises:
            UnsupportedFormat: If the tag is not a known format
        """
        if isinstance(tag, Format):
            return tag
        try:
            return cls(str(tag).lower())
        except ValueError:
            raise UnsupportedFormat(tag) from None

    @classmethod
    def for_output(cls, tag: Union["Format", str, None]) -> "Format":
        """Resolve an output format tag; anything but toml or json means YAML."""
        if isinstance(tag, Format):
            return tag
        if tag and str(tag).lower() in (cls.TOML.value, cls.JSON.value):
            return cls(str(tag).lower())
        return cls.YAML

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "Format":
        """Guess a format from a file extension."""
        suffix = Path(path).suffix.lower()
        if suffix not in _EXTENSIONS:
            raise UnsupportedFormat(suffix or str(path))
        return _EXTENSIONS[suffix]


_EXTENSIONS = {
    '.toml': Format.TOML,
    '.json': Format.JSON,
    '.yaml': Format.YAML,
    '.yml': Format.YAML,
}


def _decode_toml(text: str) -> Any:
    try:
        return tomli.loads(text)
    except tomli.TOMLDecodeError as e:
        raise DecodeError(
            Format.TOML.value,
            getattr(e, 'msg', str(e)),
            getattr(e, 'lineno', None),
            getattr(e, 'colno', None)
        ) from e


def _decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(Format.JSON.value, e.msg, e.lineno, e.colno) from e


def _decode_yaml(text: str) -> Any:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, 'problem_mark', None)
        detail = getattr(e, 'problem', None) or str(e)
        if mark is not None:
            # PyYAML marks are zero-based
            raise DecodeError(Format.YAML.value, detail, mark.line + 1, mark.column + 1) from e
        raise DecodeError(Format.YAML.value, detail) from e

    # An empty document holds no flags
    return {} if data is None else data


_DECODERS: Dict[Format, Callable[[str], Any]] = {
    Format.TOML: _decode_toml,
    Format.JSON: _decode_json,
    Format.YAML: _decode_yaml,
}


def decode(data: bytes, format_tag: Union[Format, str, None]) -> Dict[str, Any]:
    """
    Decode a flag file into a mapping of flag name to raw record.

    Records are left as plain data; interpreting them is the normalizer's job.

    Args:
        data: Raw file content
        format_tag: One of toml, json, yaml (case-insensitive)

    Returns:
        Mapping of flag name to raw record

    Raises:
        UnsupportedFormat: If the tag is unknown (checked before parsing)
        DecodeError: If the content is not valid in the declared format
    """
    fmt = Format.parse(format_tag)

    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError(fmt.value, f"input is not valid UTF-8: {e}") from e

    flags = _DECODERS[fmt](text)

    if not isinstance(flags, dict):
        raise DecodeError(
            fmt.value,
            f"expected a mapping of flag names at the top level, got {type(flags).__name__}"
        )
    for name in flags:
        if not isinstance(name, str):
            raise DecodeError(fmt.value, f"flag name {name!r} is not a string")

    return flags


def _leaves(value: Any, path: str) -> Iterator[Tuple[str, Any]]:
    """Yield (path, value) for every scalar inside a document."""
    if isinstance(value, dict):
        for key, item in value.items():
            yield from _leaves(item, f"{path}.{key}")
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from _leaves(item, f"{path}[{index}]")
    else:
        yield path, value


def _reject_nulls(document: Any, path: str) -> None:
    for leaf_path, leaf in _leaves(document, path):
        if leaf is None:
            raise EncodeError(Format.TOML.value, f"{leaf_path} is null and TOML has no null value")


def _reject_non_finite(flag: CanonicalFlag, path: str, fmt: Format) -> None:
    # Serialized documents already hold null in place of NaN and infinities
    for leaf_path, leaf in _leaves(flag.model_dump(by_alias=True, exclude_none=True), path):
        if isinstance(leaf, float) and not math.isfinite(leaf):
            raise EncodeError(fmt.value, f"{leaf_path} is {leaf}, which has no portable representation")


def _encode_toml(documents: Dict[str, Any]) -> bytes:
    for name, document in documents.items():
        _reject_nulls(document, name)
    try:
        return tomlkit.dumps(documents).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise EncodeError(Format.TOML.value, str(e)) from e


def _encode_json(documents: Dict[str, Any]) -> bytes:
    try:
        return json.dumps(documents, indent=2, ensure_ascii=False).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise EncodeError(Format.JSON.value, str(e)) from e


def _encode_yaml(documents: Dict[str, Any]) -> bytes:
    try:
        text = yaml.safe_dump(
            documents,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False
        )
    except yaml.YAMLError as e:
        raise EncodeError(Format.YAML.value, str(e)) from e
    return text.encode('utf-8')


_ENCODERS: Dict[Format, Callable[[Dict[str, Any]], bytes]] = {
    Format.TOML: _encode_toml,
    Format.JSON: _encode_json,
    Format.YAML: _encode_yaml,
}


def encode(flags: Mapping[str, CanonicalFlag], format_tag: Optional[Union[Format, str]] = None) -> bytes:
    """
    Encode canonical flags, sorted by name.

    Args:
        flags: Mapping of flag name to canonical flag
        format_tag: toml or json; anything else (including None) yields YAML

    Raises:
        EncodeError: If the target format cannot represent a value, or a
            number is NaN or infinite
    """
    fmt = Format.for_output(format_tag)
    for name in sorted(flags):
        _reject_non_finite(flags[name], name, fmt)
    documents = {name: flags[name].to_document() for name in sorted(flags)}
    return _ENCODERS[fmt](documents)
