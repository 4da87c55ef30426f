"""
Branchline string conversion (the pluggable type capability).

The matching engine only ever claims raw strings. Turning a claimed string into
the declared target type is delegated to a converter object exposing

    convert(type_identifier, raw, /, choices=()) -> value

and raising ConversionError on failure. Hosts supply their own converter or
extend the default TypeConverter with extra type identifiers.

Built-in identifiers
- "str"   → the raw string
- "int"   → int(raw) for decimals (leading zeros allowed), else int(raw, 0)
            for 0x.. / 0o.. / 0b.. prefixes
- "float" → float(raw)
- "bool"  → true/false, yes/no, on/off, 1/0 (case-insensitive)
- "path"  → pathlib.Path(raw)

Enumerations
- When choices are given, the raw string must equal one of them ignoring case;
  the declared spelling of the choice is returned.
"""
import pathlib
from types import MappingProxyType

from .utils import *


class ConversionError(ValueError):
    """
    A raw string could not be converted to its declared type.
    """

    def __init__(self, type, raw, reason, /):
        super().__init__(f"cannot convert {raw!r} to {type}: {reason}")
        self.type = type
        self.raw = raw
        self.reason = reason


def _boolean(raw, /):
    match raw.strip().lower():
        case "true" | "yes" | "on" | "1":
            return True
        case "false" | "no" | "off" | "0":
            return False
        case _:
            raise ValueError("expected one of true/false, yes/no, on/off, 1/0")


def _integer(raw, /):
    try:
        return int(raw)
    except ValueError:
        return int(raw, 0)


def _choose(type, raw, choices, /):
    for choice in choices:
        if choice.casefold() == raw.casefold():
            return choice
    raise ConversionError(type, raw, "expected one of %s" % ", ".join(map(repr, choices)))


BUILTINS = MappingProxyType({
    "str": str,
    "int": _integer,
    "float": float,
    "bool": _boolean,
    "path": pathlib.Path,
})


class TypeConverter:
    """
    Registry-backed converter keyed by type identifier.

    Parameters
    - mapping: Mapping[str, Callable[[str], object]] | Iterable[tuple[str, Callable]]
      Extra or overriding converters; merged over BUILTINS.
    - strict: bool
      When True, unknown type identifiers fail instead of passing the raw
      string through.
    """

    def __init__(self, mapping=(), /, *, strict=False):
        converters = dict(BUILTINS)
        for type, converter in dict(mapping).items():
            if not isinstance(type, str) or not type:
                raise TypeError("TypeConverter() type identifiers must be non-empty strings")
            if not callable(converter):
                raise TypeError(f"TypeConverter() converter for {type!r} must be callable")
            converters[type] = converter
        self._converters = MappingProxyType(converters)
        self._strict = bool(strict)

    converters = mirror("converters")
    strict = mirror("strict")

    def __repr__(self):
        return f"type-converter(types={tuple(self.converters)!r}, strict={self.strict!r})"

    def __contains__(self, type, /):
        return type in self._converters

    def extend(self, type, converter, /):
        """
        Return a copy of this converter that also handles `type`.

            converter = TypeConverter().extend("color", Color.parse)
        """
        if not callable(converter):
            raise TypeError("extend() second argument must be callable")
        return TypeConverter({**self._converters, type: converter}, strict=self._strict)

    def convert(self, type, raw, /, choices=()):
        """
        Convert one raw string.

        Raises
        - ConversionError: unknown type (strict mode), value outside choices,
          or the underlying converter raised ValueError / TypeError.
        """
        if choices:
            return _choose(type, raw, choices)

        try:
            converter = self._converters[type]
        except KeyError:
            if self._strict:
                raise ConversionError(type, raw, "unknown type") from None
            return raw

        try:
            return converter(raw)
        except (ValueError, TypeError) as exception:
            raise ConversionError(type, raw, str(exception) or exception.__class__.__name__) from exception


class _Passthrough:
    """
    Converter that returns every raw string unchanged (choices are still enforced).
    """

    def __repr__(self):
        return "passthrough"

    def convert(self, type, raw, /, choices=()):
        if choices:
            return _choose(type, raw, choices)
        return raw


passthrough = _Passthrough()


__all__ = (
    "ConversionError",
    "TypeConverter",
    "BUILTINS",
    "passthrough",
)
