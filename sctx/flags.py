"""Command-line flags whose values may also come from environment variables."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence

_ZERO_TEXT = {str: "", int: "0", bool: "false"}
_TYPE_NAMES = {str: "string", int: "int", bool: ""}
_BOOLS = {"1": True, "t": True, "true": True, "0": False, "f": False, "false": False}


@dataclass
class Flag:
    """A named option with a default, a help text and a current value."""

    name: str
    default: Any
    usage: str
    kind: type = str
    value: Any = None

    def __post_init__(self) -> None:
        if self.value is None:
            self.value = self.default


def _text(flag: Flag) -> str:
    if flag.kind is bool:
        return "true" if flag.default else "false"
    return str(flag.default)


def _shown_default(flag: Flag) -> str | None:
    text = _text(flag)
    if is_zero_value(flag, text):
        return None
    return json.dumps(text, ensure_ascii=False) if flag.kind is str else text


def _convert(kind: type, text: str) -> Any:
    try:
        if kind is bool:
            return _BOOLS[text.lower()]
        return int(text, 0) if kind is int else text
    except (KeyError, ValueError):
        raise ValueError(f"invalid {kind.__name__} value {text!r}") from None


def env_name(name: str, prefix: str = "") -> str:
    """Return the environment variable that backs the flag ``name``."""
    return (prefix + name.replace(".", "_").replace("-", "_")).upper()


def is_zero_value(flag: Flag, value: str) -> bool:
    """Tell whether ``value`` is the zero value text for the flag's kind."""
    return value in (_ZERO_TEXT[flag.kind], "false", "", "0")


class FlagSet:
    """An ordered collection of flags parsed from the environment and arguments."""

    def __init__(self, name: str = "", env_prefix: str = "") -> None:
        self.name = name
        self.env_prefix = env_prefix
        self._flags: dict[str, Flag] = {}

    def add(self, name: str, default: Any, usage: str = "", kind: type | None = None) -> Flag:
        """Define a flag; the kind defaults to the type of ``default``."""
        kind = kind or type(default)
        if kind not in _ZERO_TEXT:
            raise TypeError(f"unsupported flag kind: {kind!r}")
        if name in self._flags:
            raise ValueError(f"{self.name} flag redefined: {name}")
        self._flags[name] = flag = Flag(name, default, usage, kind)
        return flag

    def string(self, name: str, default: str, usage: str = "") -> Flag:
        return self.add(name, default, usage, str)

    def integer(self, name: str, default: int, usage: str = "") -> Flag:
        return self.add(name, default, usage, int)

    def get(self, name: str) -> Any:
        """Return the current value of the flag ``name``."""
        if name not in self._flags:
            raise KeyError(f"flag not defined: {name}")
        return self._flags[name].value

    def __iter__(self) -> Iterator[Flag]:
        return iter(sorted(self._flags.values(), key=lambda flag: flag.name))

    def parse(
        self, args: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
    ) -> list[str]:
        """Apply environment variables, then ``args``; return the positional rest."""
        environ = os.environ if environ is None else environ
        for flag in self:
            text = environ.get(env_name(flag.name, self.env_prefix), "")
            if text:
                flag.value = _convert(flag.kind, text)
        rest = list(args or [])
        while rest and len(rest[0]) > 1 and rest[0].startswith("-"):
            arg = rest.pop(0)
            if arg == "--":
                break
            name, has_value, text = arg.lstrip("-").partition("=")
            flag = self._flags.get(name)
            if flag is None:
                raise ValueError(f"flag provided but not defined: -{name}")
            if not has_value:
                if flag.kind is bool:
                    text = "true"
                elif rest:
                    text = rest.pop(0)
                else:
                    raise ValueError(f"flag needs an argument: -{name}")
            flag.value = _convert(flag.kind, text)
        return rest

    def usage(self) -> str:
        """Return the help text listing every flag and its environment variable."""
        lines = [f"Usage of {self.name}:"]
        for flag in self:
            type_name, text = _TYPE_NAMES[flag.kind], flag.usage
            head, tick, tail = text.partition("`")
            if tick and "`" in tail:
                type_name, _, after = tail.partition("`")
                text = head + type_name + after
            line = f"  -{flag.name}" + (f" {type_name}" if type_name else "")
            line += ("\t" if len(line) <= 4 else "\n    \t") + text
            default = _shown_default(flag)
            if default is not None:
                line += f" (default {default})"
            lines.append(line + f" [${env_name(flag.name, self.env_prefix)}]")
        return "\n".join(lines) + "\n"

    def sample_envs(self) -> str:
        """Return a commented sample environment file for all flags."""
        blocks = []
        for flag in self:
            if flag.name == "outenv":
                continue
            default = _shown_default(flag) or ""
            key = env_name(flag.name, self.env_prefix)
            blocks.append(f"## {flag.usage} (-{flag.name})\n#{key}={default}\n\n")
        return "".join(blocks)