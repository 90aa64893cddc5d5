"""A small text-template engine for configuration values."""

from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass
from typing import Any, Callable

try:
    import pwd as _accounts
except ImportError:  # pragma: no cover - non-POSIX systems
    _accounts = None


class TemplateError(Exception):
    """Raised when a template cannot be parsed or executed."""


@dataclass(frozen=True)
class UserInfo:
    """The account running the process."""

    Username: str
    Uid: str
    Gid: str
    HomeDir: str
    Name: str


def _current_user() -> UserInfo:
    if _accounts is None:
        raise TemplateError("user lookup is not supported on this system")
    entry = _accounts.getpwuid(os.getuid())
    return UserInfo(
        Username=entry.pw_name,
        Uid=str(entry.pw_uid),
        Gid=str(entry.pw_gid),
        HomeDir=entry.pw_dir,
        Name=entry.pw_gecos.split(",")[0],
    )


def find_project_root() -> tuple[str, str]:
    """Return the nearest directory holding ``.git`` and the cwd relative to it."""
    cwd = os.getcwd()
    directory = cwd
    while directory != os.path.dirname(directory):
        if os.path.isdir(os.path.join(directory, ".git")):
            return directory, os.path.relpath(cwd, directory)
        directory = os.path.dirname(directory)
    return cwd, "."


def _default(fallback: Any, given: Any = None) -> Any:
    return given if given else fallback


_SPRIG: dict[str, Callable[..., Any]] = {
    "trim": lambda s: str(s).strip(),
    "upper": lambda s: str(s).upper(),
    "lower": lambda s: str(s).lower(),
    "title": lambda s: str(s).title(),
    "trimPrefix": lambda p, s: s[len(p):] if s.startswith(p) else s,
    "trimSuffix": lambda p, s: s[: -len(p)] if p and s.endswith(p) else s,
    "replace": lambda old, new, s: str(s).replace(old, new),
    "default": _default,
    "quote": lambda *xs: " ".join('"' + str(x).replace('"', '\\"') + '"' for x in xs),
    "squote": lambda *xs: " ".join("'" + str(x) + "'" for x in xs),
    "base": os.path.basename,
    "dir": os.path.dirname,
    "clean": os.path.normpath,
}

_ACTION = re.compile(r"\{\{(-\s)?(.*?)(\s-)?\}\}", re.S)
_LEXER = re.compile(
    r"""\s*(?:
        (?P<str>"(?:[^"\\]|\\.)*")
      | (?P<raw>`[^`]*`)
      | (?P<num>-?\d+(?:\.\d+)?)
      | (?P<field>\.[A-Za-z_]\w*)
      | (?P<dot>\.)
      | (?P<ident>[A-Za-z_]\w*)
      | (?P<punct>[()|])
    )""",
    re.X,
)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\", "'": "'"}
_LITERALS = {"true": True, "false": False, "nil": None}
_NOTHING = object()


def _unescape(body: str) -> str:
    def repl(m: re.Match) -> str:
        char = m.group(1)
        if char not in _ESCAPES:
            raise TemplateError(f"invalid escape sequence \\{char}")
        return _ESCAPES[char]

    return re.sub(r"\\(.)", repl, body, flags=re.S)


def _lex(body: str) -> list[tuple[str, str]]:
    lexemes = []
    pos = 0
    while body[pos:].strip():
        m = _LEXER.match(body, pos)
        if m is None:
            raise TemplateError(f"unexpected text in action: {body[pos:].strip()!r}")
        lexemes.append((m.lastgroup, m.group(m.lastgroup)))
        pos = m.end()
    return lexemes


def _format(value: Any) -> str:
    if value is None:
        return "<no value>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class _Evaluator:
    def __init__(self, lexemes: list[tuple[str, str]], funcs: dict[str, Callable]):
        self.lexemes = lexemes
        self.pos = 0
        self.funcs = funcs

    def peek(self) -> tuple[str, str] | None:
        return self.lexemes[self.pos] if self.pos < len(self.lexemes) else None

    def take(self) -> tuple[str, str]:
        item = self.peek()
        if item is None:
            raise TemplateError("unexpected end of action")
        self.pos += 1
        return item

    def run(self) -> Any:
        if not self.lexemes:
            raise TemplateError("missing value for command")
        value = self.pipeline()
        if self.peek() is not None:
            raise TemplateError(f"unexpected {self.peek()[1]!r} in action")
        return value

    def pipeline(self) -> Any:
        value = self.command(_NOTHING)
        while self.peek() == ("punct", "|"):
            self.take()
            value = self.command(value)
        return value

    def command(self, piped: Any) -> Any:
        operands = []
        while (item := self.peek()) is not None and item[1] not in (")", "|"):
            operands.append(self.operand())
        if not operands:
            raise TemplateError("missing value for command")
        head = operands[0]
        if head[0] == "func" and not head[2]:
            args = [self.resolve(op) for op in operands[1:]]
            if piped is not _NOTHING:
                args.append(piped)
            return self.call(head[1], args)
        if len(operands) > 1 or piped is not _NOTHING:
            raise TemplateError("can't give argument to non-function")
        return self.resolve(head)

    def operand(self) -> tuple[str, Any, list[str]]:
        kind, text = self.take()
        if kind == "str":
            op = ("value", _unescape(text[1:-1]))
        elif kind == "raw":
            op = ("value", text[1:-1])
        elif kind == "num":
            op = ("value", float(text) if "." in text else int(text))
        elif kind == "dot":
            op = ("value", None)
        elif kind == "ident":
            if text in _LITERALS:
                op = ("value", _LITERALS[text])
            elif text in self.funcs:
                op = ("func", text)
            else:
                raise TemplateError(f'function "{text}" not defined')
        elif text == "(":
            value = self.pipeline()
            if self.take() != ("punct", ")"):
                raise TemplateError("unclosed left paren")
            op = ("value", value)
        else:
            raise TemplateError(f"unexpected {text!r} in operand")
        fields = []
        while (item := self.peek()) is not None and item[0] == "field":
            fields.append(self.take()[1][1:])
        return op[0], op[1], fields

    def resolve(self, op: tuple[str, Any, list[str]]) -> Any:
        kind, value, fields = op
        if kind == "func":
            value = self.call(value, [])
        for name in fields:
            if isinstance(value, dict) and name in value:
                value = value[name]
            elif hasattr(value, name) and not name.startswith("_"):
                value = getattr(value, name)
            else:
                raise TemplateError(f"can't evaluate field {name}")
        return value

    def call(self, name: str, args: list[Any]) -> Any:
        try:
            return self.funcs[name](*args)
        except TemplateError:
            raise
        except (OSError, TypeError, ValueError, subprocess.SubprocessError) as err:
            raise TemplateError(f"error calling {name}: {err}") from err


@dataclass
class TemplateContext:
    """Template functions bound to the file being rendered."""

    filename: str = ""

    def functions(self) -> dict[str, Callable[..., Any]]:
        funcs = dict(_SPRIG)
        funcs.update(
            {
                "user": _current_user,
                "cwd": os.getcwd,
                "env": lambda key: os.environ.get(key, ""),
                "currentFile": lambda: self.filename,
                "currentDir": self._current_dir,
                "sh": self._run_shell,
                "readFile": self._read_file,
                "projectRoot": lambda: find_project_root()[0],
                "projectPath": lambda: find_project_root()[1],
            }
        )
        return funcs

    def render(self, text: str) -> str:
        """Expand every ``{{ ... }}`` action in ``text``."""
        funcs = self.functions()
        parts: list[str] = []
        pos = 0
        trim_next = False
        for m in _ACTION.finditer(text):
            literal = text[pos:m.start()]
            if trim_next:
                literal = literal.lstrip()
            if m.group(1):
                literal = literal.rstrip()
            parts.append(literal)
            body = m.group(2).strip()
            if not (body.startswith("/*") and body.endswith("*/")):
                parts.append(_format(_Evaluator(_lex(body), funcs).run()))
            trim_next = bool(m.group(3))
            pos = m.end()
        tail = text[pos:]
        if "{{" in tail:
            raise TemplateError("unclosed action")
        parts.append(tail.lstrip() if trim_next else tail)
        return "".join(parts)

    def _current_dir(self) -> str:
        return os.path.dirname(self.filename) or "."

    @staticmethod
    def _run_shell(command: str) -> str:
        result = subprocess.run(
            ["/bin/sh", "-c", command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            check=True,
        )
        return result.stdout.decode()

    def _read_file(self, path: str) -> str:
        with open(os.path.join(self._current_dir(), path), encoding="utf-8") as fh:
            return fh.read()


def template_tree(data: Any, filename: str) -> Any:
    """Render every string value (not keys) in a parsed document."""
    ctx = TemplateContext(filename)

    def walk(node: Any) -> Any:
        if isinstance(node, str):
            return ctx.render(node)
        if isinstance(node, dict):
            return {key: walk(item) for key, item in node.items()}
        if isinstance(node, list):
            return [walk(item) for item in node]
        return node

    return walk(data)