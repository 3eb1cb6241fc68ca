"""A small JSONPath interpreter.

Rules read third-party JSON payloads whose shape changes without notice, so
evaluation is tolerant: a path that does not resolve yields no match instead
of an error. Only a path that cannot be parsed raises `JSONPathError`.

Supported syntax::

    $                       root
    .name  ['name']  [name] child by key
    .*  [*]                 every child
    ..name  ..*  ..[...]    recursive descent
    [0]  [-1]  [1:3]  [::2] index and slices
    [a,'b',0]               union
    [(@.length-1)]          script expression, result used as index or key
    [?(@.type == 'image')]  filter expression
"""

import re
from functools import lru_cache
from typing import Any, Callable, Iterator, List, Optional, Tuple


class JSONPathError(ValueError):
    """The path expression is not valid."""


class _Miss(Exception):
    """An expression could not be evaluated against the current node."""


_INT_RE = re.compile(r"^-?\d+$")


# --- Expressions -------------------------------------------------------------

_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<number>\d+(?:\.\d+)?)
      | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
      | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
      | (?P<op>==|!=|<=|>=|&&|\|\||[@$.\[\]()+\-*/%<>!])
    )""",
    re.VERBOSE,
)

_CONSTANTS = {"true": True, "false": False, "null": None}


def _unquote(token: str) -> str:
    body = token[1:-1]
    return re.sub(r"\\(.)", r"\1", body)


def _tokenize(expr: str) -> List[Tuple[str, str]]:
    tokens = []
    pos = 0
    expr = expr.rstrip()
    while pos < len(expr):
        m = _TOKEN_RE.match(expr, pos)
        if not m or m.end() == pos:
            raise JSONPathError(f"unexpected character in expression {expr!r} at {pos}")
        kind = m.lastgroup
        tokens.append((kind, m.group(kind)))
        pos = m.end()
    return tokens


class _ExprParser:
    """Recursive descent parser producing nested tuples."""

    def __init__(self, expr: str):
        self.expr = expr
        self.tokens = _tokenize(expr)
        self.pos = 0

    def parse(self):
        node = self._or()
        if self.pos != len(self.tokens):
            raise JSONPathError(f"unexpected token {self.tokens[self.pos][1]!r} in {self.expr!r}")
        return node

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][1]
        return None

    def _next(self) -> Tuple[str, str]:
        if self.pos >= len(self.tokens):
            raise JSONPathError(f"unexpected end of expression {self.expr!r}")
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _expect(self, value: str):
        kind, tok = self._next()
        if tok != value:
            raise JSONPathError(f"expected {value!r}, got {tok!r} in {self.expr!r}")

    def _binary(self, operators, operand):
        node = operand()
        while self._peek() in operators:
            _, op = self._next()
            node = ("binop", op, node, operand())
        return node

    def _or(self):
        return self._binary(("||",), self._and)

    def _and(self):
        return self._binary(("&&",), self._compare)

    def _compare(self):
        node = self._additive()
        if self._peek() in ("==", "!=", "<", "<=", ">", ">="):
            _, op = self._next()
            node = ("binop", op, node, self._additive())
        return node

    def _additive(self):
        return self._binary(("+", "-"), self._multiplicative)

    def _multiplicative(self):
        return self._binary(("*", "/", "%"), self._unary)

    def _unary(self):
        if self._peek() in ("!", "-"):
            _, op = self._next()
            return ("unary", op, self._unary())
        return self._primary()

    def _primary(self):
        kind, tok = self._next()
        if kind == "number":
            return ("const", float(tok) if "." in tok else int(tok))
        if kind == "string":
            return ("const", _unquote(tok))
        if kind == "name":
            if tok in _CONSTANTS:
                return ("const", _CONSTANTS[tok])
            raise JSONPathError(f"unknown name {tok!r} in {self.expr!r}")
        if tok == "(":
            node = self._or()
            self._expect(")")
            return node
        if tok in ("@", "$"):
            return ("path", tok, self._accessors())
        raise JSONPathError(f"unexpected token {tok!r} in {self.expr!r}")

    def _accessors(self) -> Tuple:
        accessors = []
        while self._peek() in (".", "["):
            _, tok = self._next()
            if tok == ".":
                kind, name = self._next()
                if kind != "name":
                    raise JSONPathError(f"expected a name after '.' in {self.expr!r}")
                accessors.append(name)
            else:
                kind, key = self._next()
                if kind == "number" and "." not in key:
                    accessors.append(int(key))
                elif kind == "string":
                    accessors.append(_unquote(key))
                elif key == "-" and self._peek() is not None and self.tokens[self.pos][0] == "number":
                    _, num = self._next()
                    accessors.append(-int(num))
                else:
                    raise JSONPathError(f"invalid subscript {key!r} in {self.expr!r}")
                self._expect("]")
        return tuple(accessors)


def _access(value: Any, key) -> Any:
    if isinstance(key, int):
        if isinstance(value, list) and -len(value) <= key < len(value):
            return value[key]
        raise _Miss()
    if isinstance(value, dict):
        if key in value:
            return value[key]
        if key == "length":
            return len(value)
        raise _Miss()
    if key == "length" and isinstance(value, (list, str)):
        return len(value)
    raise _Miss()


_BINOPS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
    "%": lambda a, b: a % b,
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
}


def _evaluate(node, current: Any, root: Any) -> Any:
    kind = node[0]
    if kind == "const":
        return node[1]
    if kind == "path":
        value = current if node[1] == "@" else root
        for key in node[2]:
            value = _access(value, key)
        return value
    if kind == "unary":
        value = _evaluate(node[2], current, root)
        if node[1] == "!":
            return not value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _Miss()
        return -value

    op, left, right = node[1], node[2], node[3]
    if op == "&&":
        return bool(_truthy(left, current, root) and _truthy(right, current, root))
    if op == "||":
        return bool(_truthy(left, current, root) or _truthy(right, current, root))
    try:
        return _BINOPS[op](_evaluate(left, current, root), _evaluate(right, current, root))
    except (TypeError, ZeroDivisionError) as e:
        raise _Miss() from e


def _truthy(node, current: Any, root: Any) -> bool:
    try:
        value = _evaluate(node, current, root)
    except _Miss:
        return False
    return value is not None and value is not False


# --- Selectors ---------------------------------------------------------------

Selector = Callable[[Any, Any], List[Any]]


def _children(value: Any) -> List[Any]:
    if isinstance(value, dict):
        return list(value.values())
    if isinstance(value, list):
        return list(value)
    return []


def _select_key(key: str) -> Selector:
    def select(value, root):
        if isinstance(value, dict) and key in value:
            return [value[key]]
        return []
    return select


def _select_index(index: int) -> Selector:
    def select(value, root):
        if isinstance(value, list) and -len(value) <= index < len(value):
            return [value[index]]
        if isinstance(value, dict) and str(index) in value:
            return [value[str(index)]]
        return []
    return select


def _select_slice(start: Optional[int], end: Optional[int], step: Optional[int]) -> Selector:
    def select(value, root):
        if isinstance(value, list):
            return value[start:end:step]
        return []
    return select


def _select_all(value, root):
    return _children(value)


def _select_script(expr) -> Selector:
    def select(value, root):
        try:
            result = _evaluate(expr, value, root)
        except _Miss:
            return []
        if isinstance(result, float) and result.is_integer():
            result = int(result)
        if isinstance(result, bool):
            return []
        if isinstance(result, int):
            return _select_index(result)(value, root)
        if isinstance(result, str):
            return _select_key(result)(value, root)
        return []
    return select


def _select_filter(expr) -> Selector:
    def select(value, root):
        return [child for child in _children(value) if _truthy(expr, child, root)]
    return select


# --- Path parsing ------------------------------------------------------------

def _find_closing(path: str, start: int) -> int:
    """Return the index of the `]` closing the bracket opened at `start`."""
    depth = 0
    quote = None
    i = start
    while i < len(path):
        c = path[i]
        if quote:
            if c == "\\":
                i += 1
            elif c == quote:
                quote = None
        elif c in ("'", '"'):
            quote = c
        elif c in "[(":
            depth += 1
        elif c in "])":
            depth -= 1
            if depth == 0:
                if c != "]":
                    break
                return i
        i += 1
    raise JSONPathError(f"unbalanced bracket in {path!r}")


def _split_union(content: str) -> List[str]:
    parts = []
    quote = None
    current = ""
    for c in content:
        if quote:
            if c == quote:
                quote = None
        elif c in ("'", '"'):
            quote = c
        elif c == ",":
            parts.append(current)
            current = ""
            continue
        current += c
    parts.append(current)
    return [p.strip() for p in parts]


def _parse_bracket(content: str, path: str) -> List[Selector]:
    content = content.strip()
    if content.startswith("?(") and content.endswith(")"):
        return [_select_filter(_ExprParser(content[2:-1]).parse())]
    if content.startswith("(") and content.endswith(")"):
        return [_select_script(_ExprParser(content[1:-1]).parse())]

    selectors = []
    for item in _split_union(content):
        if not item:
            raise JSONPathError(f"empty selector in {path!r}")
        if item == "*":
            selectors.append(_select_all)
        elif item[0] in ("'", '"'):
            if len(item) < 2 or item[-1] != item[0]:
                raise JSONPathError(f"unterminated string {item!r} in {path!r}")
            selectors.append(_select_key(_unquote(item)))
        elif ":" in item:
            bounds = [b.strip() for b in item.split(":")]
            if len(bounds) > 3 or any(b and not _INT_RE.match(b) for b in bounds):
                raise JSONPathError(f"invalid slice {item!r} in {path!r}")
            start, end, step = (bounds + ["", ""])[:3]
            if step and int(step) == 0:
                raise JSONPathError(f"slice step cannot be zero in {path!r}")
            selectors.append(_select_slice(
                int(start) if start else None,
                int(end) if end else None,
                int(step) if step else None,
            ))
        elif _INT_RE.match(item):
            selectors.append(_select_index(int(item)))
        else:
            selectors.append(_select_key(item))
    return selectors


def _read_name(path: str, pos: int) -> Tuple[str, int]:
    end = pos
    while end < len(path) and path[end] not in ".[":
        end += 1
    name = path[pos:end].strip()
    if not name:
        raise JSONPathError(f"missing name at {pos} in {path!r}")
    return name, end


@lru_cache(maxsize=256)
def compile_path(path: str) -> Tuple[Tuple[bool, Tuple[Selector, ...]], ...]:
    """Parse a path into a tuple of (recursive, selectors) steps."""
    if not isinstance(path, str):
        raise JSONPathError(f"path must be a string, not {type(path).__name__}")
    path = path.strip()
    if not path.startswith("$"):
        raise JSONPathError(f"path must start with '$': {path!r}")

    steps = []
    pos = 1
    while pos < len(path):
        recursive = False
        if path.startswith("..", pos):
            recursive = True
            pos += 2
        elif path[pos] == ".":
            pos += 1
        elif path[pos] != "[":
            raise JSONPathError(f"unexpected {path[pos]!r} at {pos} in {path!r}")

        if pos < len(path) and path[pos] == "[":
            end = _find_closing(path, pos)
            selectors = _parse_bracket(path[pos + 1:end], path)
            pos = end + 1
        else:
            name, pos = _read_name(path, pos)
            selectors = [_select_all] if name == "*" else [_select_key(name)]

        steps.append((recursive, tuple(selectors)))

    return tuple(steps)


def _walk(value: Any) -> Iterator[Any]:
    yield value
    for child in _children(value):
        yield from _walk(child)


def find(value: Any, path: str) -> List[Any]:
    """Return every value matching `path`, in document order."""
    current = [value]
    for recursive, selectors in compile_path(path):
        candidates = [n for v in current for n in _walk(v)] if recursive else current
        current = [match for node in candidates for select in selectors for match in select(node, value)]
        if not current:
            break
    return current


def first(value: Any, path: str, default: Any = None) -> Any:
    matches = find(value, path)
    return matches[0] if matches else default
