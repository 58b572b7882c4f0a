"""Line-oriented parser for the VimFlavor declaration syntax.

The syntax looks like Ruby but is never evaluated. Only three statements
exist::

    flavor 'kana/vim-textobj-user', '~> 0.3'
    flavor 'thinca/vim-themis', group: :development
    group :development do
      flavor 'kana/vim-vspec', '~> 1.0', name: 'vspec'
    end

Options may be written ``key: value`` or ``:key => value``. Comments start
with ``#`` outside string literals.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from vimflavor.core.flavor.models import DEFAULT_GROUP, Flavor, repo_uri_from_name
from vimflavor.core.version import DEFAULT_CONSTRAINT, VersionConstraint
from vimflavor.exceptions import ConstraintError, FlavorfileError

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<comment>\#.*)
    |(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<label>[A-Za-z_]\w*):(?!:)
    |(?P<symbol>:[A-Za-z_]\w*)
    |(?P<word>[A-Za-z_]\w*)
    |(?P<arrow>=>)
    |(?P<comma>,)
    """,
    re.VERBOSE,
)

_ESCAPE_RE = re.compile(r"\\(.)")

_GROUP_OPTIONS = ("group", "groups")
_NAME_OPTION = "name"


@dataclass(frozen=True)
class Token:
    kind: str
    value: str


def _unquote(literal: str) -> str:
    return _ESCAPE_RE.sub(r"\1", literal[1:-1])


def tokenize(line: str, where: str) -> list[Token]:
    """Split one line into tokens, dropping whitespace and comments.

    Raises:
        FlavorfileError: On characters that start no valid token.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(line):
        m = _TOKEN_RE.match(line, pos)
        if not m:
            raise FlavorfileError(f"{where}: unexpected text {line[pos:]!r}")
        pos = m.end()
        kind = m.lastgroup
        if kind == "comment":
            break
        if kind == "space":
            continue
        if kind == "string":
            tokens.append(Token("string", _unquote(m.group("string"))))
        elif kind == "label":
            tokens.append(Token("label", m.group("label")))
        elif kind == "symbol":
            tokens.append(Token("symbol", m.group("symbol")[1:]))
        else:
            tokens.append(Token(kind, m.group(kind)))
    return tokens


def _split_args(tokens: list[Token], where: str) -> Iterator[list[Token]]:
    current: list[Token] = []
    for token in tokens:
        if token.kind == "comma":
            if not current:
                raise FlavorfileError(f"{where}: empty argument")
            yield current
            current = []
        else:
            current.append(token)
    if current:
        yield current
    elif tokens:
        raise FlavorfileError(f"{where}: trailing comma")


def _value(token: Token, where: str) -> str:
    if token.kind not in ("string", "symbol"):
        raise FlavorfileError(
            f"{where}: expected a string or symbol, got {token.value!r}"
        )
    return token.value


def _parse_flavor(tokens: list[Token], groups: tuple[str, ...], where: str) -> Flavor:
    positional: list[str] = []
    options: dict[str, str] = {}

    for arg in _split_args(tokens, where):
        if len(arg) == 1:
            if options:
                raise FlavorfileError(f"{where}: positional argument after options")
            if arg[0].kind != "string":
                raise FlavorfileError(
                    f"{where}: expected a quoted string, got {arg[0].value!r}"
                )
            positional.append(arg[0].value)
        elif len(arg) == 2 and arg[0].kind == "label":
            options[arg[0].value] = _value(arg[1], where)
        elif len(arg) == 3 and arg[0].kind == "symbol" and arg[1].kind == "arrow":
            options[arg[0].value] = _value(arg[2], where)
        else:
            text = " ".join(t.value for t in arg)
            raise FlavorfileError(f"{where}: cannot parse argument {text!r}")

    if not positional:
        raise FlavorfileError(f"{where}: flavor needs a repository name")
    if len(positional) > 2:
        raise FlavorfileError(f"{where}: too many arguments to flavor")

    unknown = sorted(set(options) - {*_GROUP_OPTIONS, _NAME_OPTION})
    if unknown:
        raise FlavorfileError(f"{where}: unknown option(s): {', '.join(unknown)}")

    repo = positional[0]
    constraint = positional[1] if len(positional) == 2 else DEFAULT_CONSTRAINT
    try:
        VersionConstraint.parse(constraint)
    except ConstraintError as exc:
        raise FlavorfileError(f"{where}: {exc}") from exc

    for key in _GROUP_OPTIONS:
        if key in options:
            groups = (options[key],)

    return Flavor(
        repo_name=options.get(_NAME_OPTION, repo),
        repo_uri=repo_uri_from_name(repo),
        groups=groups,
        version_constraint=constraint,
    )


def _parse_group_header(tokens: list[Token], where: str) -> tuple[str, ...]:
    if not tokens or tokens[-1] != Token("word", "do"):
        raise FlavorfileError(f"{where}: group must end with 'do'")
    args = list(_split_args(tokens[:-1], where))
    if not args or any(len(arg) != 1 for arg in args):
        raise FlavorfileError(f"{where}: group needs one or more names")
    return tuple(_value(arg[0], where) for arg in args)


def parse_flavors(text: str, source: str = "VimFlavor") -> list[Flavor]:
    """Parse VimFlavor text into flavors, in declaration order.

    Args:
        text: File contents.
        source: Name used in error messages.

    Raises:
        FlavorfileError: On any syntax error or unclosed ``group`` block.
    """
    flavors: list[Flavor] = []
    group_stack: list[tuple[str, ...]] = []

    for lineno, line in enumerate(text.splitlines(), start=1):
        where = f"{source}:{lineno}"
        tokens = tokenize(line, where)
        if not tokens:
            continue
        head, rest = tokens[0], tokens[1:]
        if head == Token("word", "flavor"):
            groups = group_stack[-1] if group_stack else (DEFAULT_GROUP,)
            flavors.append(_parse_flavor(rest, groups, where))
        elif head == Token("word", "group"):
            group_stack.append(_parse_group_header(rest, where))
        elif head == Token("word", "end") and not rest:
            if not group_stack:
                raise FlavorfileError(f"{where}: 'end' without 'group'")
            group_stack.pop()
        else:
            raise FlavorfileError(f"{where}: unknown statement {head.value!r}")

    if group_stack:
        raise FlavorfileError(f"{source}: unclosed group block")
    return flavors
