"""
Decorator resolution for the runtime interpreter.

Decorators are ordinary lexically scoped values. The resolver evaluates the
small expression forms decorators and computed keys use (identifiers,
dotted paths, calls with literal or path arguments) against a namespace of
Python values. Factory calls such as ``@isTestable(true)`` are invoked here,
before the chain evaluator runs.
"""
import json
import logging
import re
from typing import Any, List, Mapping, Optional

from decolower.core.error_handling import ResolutionError
from decolower.models.syntax import DecoratorExpression

logger = logging.getLogger(__name__)

_PATH_RE = re.compile(r'^[A-Za-z_$][\w$]*(\s*\.\s*[A-Za-z_$][\w$]*)*$')
_NUMBER_RE = re.compile(r'^-?(\d[\d_]*\.?\d*([eE][+-]?\d+)?|\.\d+([eE][+-]?\d+)?|0[xX][\da-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+)$')
_CALL_RE = re.compile(r'^(?P<callee>[A-Za-z_$][\w$.\s]*?)\s*\((?P<args>.*)\)$', re.DOTALL)
_KEYWORDS = {'true': True, 'false': False, 'null': None, 'undefined': None}


class NamespaceResolver:
    """Resolves decorator and key expressions against a mapping of names."""

    def __init__(self, namespace: Mapping[str, Any]):
        self.namespace = namespace

    def resolve(self, decorator: DecoratorExpression) -> Any:
        """
        Turn a decorator expression into the function the chain will call.

        Raises:
            ResolutionError: If a name is unbound or the expression form is unsupported
        """
        if decorator.callee is None:
            return self.evaluate(decorator.text)
        target = self.lookup(decorator.callee)
        if not decorator.is_call:
            return target
        if not callable(target):
            raise ResolutionError(decorator.text, f"'{decorator.callee}' is not callable")
        args = [self.evaluate(arg) for arg in decorator.arguments]
        logger.debug(f'Calling decorator factory {decorator.callee} with {len(args)} arguments')
        return target(*args)

    def evaluate(self, expression: str) -> Any:
        """
        Evaluate a literal, a dotted path or a simple call.

        Raises:
            ResolutionError: If the expression cannot be evaluated
        """
        text = expression.strip()
        while text.startswith('(') and text.endswith(')') and _balanced(text[1:-1]):
            text = text[1:-1].strip()
        if text in _KEYWORDS:
            return _KEYWORDS[text]
        if _NUMBER_RE.match(text):
            return _number(text)
        if len(text) >= 2 and text[0] in '\'"`' and text[-1] == text[0]:
            return _string(text)
        if _PATH_RE.match(text):
            return self.lookup(text)
        call = _CALL_RE.match(text)
        if call and _balanced(call.group('args')):
            callee = self.lookup(call.group('callee'))
            if not callable(callee):
                raise ResolutionError(expression, f"'{call.group('callee').strip()}' is not callable")
            return callee(*[self.evaluate(arg) for arg in split_arguments(call.group('args'))])
        raise ResolutionError(expression, 'unsupported expression form')

    def lookup(self, path: str) -> Any:
        parts = [p.strip() for p in path.split('.')]
        if parts[0] not in self.namespace:
            raise ResolutionError(path, f"'{parts[0]}' is not defined")
        value = self.namespace[parts[0]]
        for part in parts[1:]:
            value = _member(value, part, path)
        return value


def split_arguments(text: str) -> List[str]:
    """Split an argument list on top-level commas."""
    args: List[str] = []
    depth = 0
    quote: Optional[str] = None
    current: List[str] = []
    escaped = False
    for ch in text:
        if quote:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in '\'"`':
            quote = ch
        elif ch in '([{':
            depth += 1
        elif ch in ')]}':
            depth -= 1
        elif ch == ',' and depth == 0:
            args.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)
    tail = ''.join(current).strip()
    if tail:
        args.append(tail)
    return args


def _member(value: Any, name: str, path: str) -> Any:
    if isinstance(value, Mapping):
        if name in value:
            return value[name]
    elif hasattr(value, 'get') and hasattr(value, 'has_own_property'):
        found = value.get(name)
        if found is not None:
            return found
    elif hasattr(value, name):
        return getattr(value, name)
    raise ResolutionError(path, f"no member '{name}'")


def _balanced(text: str) -> bool:
    depth = 0
    for ch in text:
        if ch in '([{':
            depth += 1
        elif ch in ')]}':
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def _number(text: str) -> Any:
    cleaned = text.replace('_', '')
    if cleaned.lower().lstrip('-').startswith(('0x', '0o', '0b')):
        return int(cleaned, 0)
    number = float(cleaned)
    return int(number) if number.is_integer() and not any(c in cleaned for c in '.eE') else number


def _string(text: str) -> str:
    body = text[1:-1]
    if text[0] != '"':
        body = body.replace('\\' + text[0], text[0]).replace('"', '\\"')
    try:
        return json.loads(f'"{body}"')
    except ValueError as e:
        raise ResolutionError(text, f'invalid string literal ({e})') from e
