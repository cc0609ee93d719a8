"""
Paren Programming Language Parser
Tokenizer and recursive-descent parser producing call trees
"""

from typing import List, Tuple, Any
from dataclasses import dataclass, field
from pathlib import Path
import re
import sys

from error_handling import ParenParseError, ParenSourceError, locate_parse_error
from expressions import (
    Expression, Identifier, StringLiteral, IntLiteral, LongLiteral, DoubleLiteral,
    BooleanLiteral, Call, INT_MIN, INT_MAX, LONG_MIN, LONG_MAX, kind_name
)


# Token types
GROUP_OPEN = "GROUP_OPEN"
GROUP_CLOSE = "GROUP_CLOSE"
IDENTIFIER = "IDENTIFIER"
STRING = "STRING"
INT = "INT"
LONG = "LONG"
DOUBLE = "DOUBLE"
BOOLEAN = "BOOLEAN"

LITERAL_TOKENS = {
    STRING: StringLiteral,
    INT: IntLiteral,
    LONG: LongLiteral,
    DOUBLE: DoubleLiteral,
    BOOLEAN: BooleanLiteral,
}


@dataclass(frozen=True)
class Token:
    """Paren token; offset is the character position where the token starts"""
    type: str
    value: Any = None
    offset: int = field(default=0, compare=False)

    def __str__(self) -> str:
        if self.type == GROUP_OPEN:
            return "("
        if self.type == GROUP_CLOSE:
            return ")"
        return f"{self.type}({self.value!r})"


class ParenTokenizer:
    """Paren tokenizer: scans characters, flushing a buffer on delimiters"""

    QUOTE = '"'
    # Space and newline always separate; tab, carriage return and comma are accepted too
    SEPARATORS = frozenset(" \n\t\r,")

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_token_patterns()

    def _setup_token_patterns(self):
        """Setup the literal classification patterns"""

        # Integers: optional sign then ASCII digits only
        self.integer_pattern = re.compile(r'[+-]?[0-9]+')

        # Floating point: decimal with optional fraction and exponent, or inf/infinity/nan
        self.float_pattern = re.compile(
            r'[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)',
            re.IGNORECASE
        )

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Paren source code. Total: every input yields a token list"""
        tokens = []
        buffer = []
        start = 0
        in_string = False

        def flush():
            if buffer:
                tokens.append(self.classify(''.join(buffer), start))
                buffer.clear()

        for offset, char in enumerate(text):
            if in_string:
                buffer.append(char)
                if char == self.QUOTE:
                    in_string = False
                continue

            if char in '()':
                flush()
                tokens.append(Token(GROUP_OPEN if char == '(' else GROUP_CLOSE, None, offset))
            elif char in self.SEPARATORS:
                flush()
            else:
                if not buffer:
                    start = offset
                buffer.append(char)
                if char == self.QUOTE:
                    in_string = True

        flush()

        if self.debug:
            print(f"[tokenize] {len(tokens)} tokens: {' '.join(str(t) for t in tokens)}", file=sys.stderr)
        return tokens

    def classify(self, text: str, offset: int = 0) -> Token:
        """Classify buffered text, first match wins: int, long, double, boolean, string, identifier"""
        if self.integer_pattern.fullmatch(text):
            value = int(text)
            if INT_MIN <= value <= INT_MAX:
                return Token(INT, value, offset)
            if LONG_MIN <= value <= LONG_MAX:
                return Token(LONG, value, offset)

        if self.float_pattern.fullmatch(text):
            return Token(DOUBLE, float(text), offset)

        if text == "true":
            return Token(BOOLEAN, True, offset)
        if text == "false":
            return Token(BOOLEAN, False, offset)

        if len(text) >= 2 and text[0] == self.QUOTE and text[-1] == self.QUOTE:
            return Token(STRING, text[1:-1], offset)

        return Token(IDENTIFIER, text, offset)


class ParenParser:
    """Main Paren parser combining tokenizer and call-tree construction"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.tokenizer = ParenTokenizer(debug)

    def parse_file(self, filepath: str) -> List[Expression]:
        """Parse a Paren source file"""
        return self.parse_string(load_source(filepath))

    def parse_string(self, text: str) -> List[Expression]:
        """Parse Paren source code from string"""
        return self.parse_tokens(self.tokenize(text), text)

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Paren source code"""
        return self.tokenizer.tokenize(text)

    def parse_tokens(self, tokens: List[Token], source_text: str = "") -> List[Expression]:
        """Parse a token list into top-level calls. The first structural error aborts the parse"""
        exprs = []
        position = 0
        while position < len(tokens):
            call, position = self._parse_call(tokens, position, source_text)
            if self.debug:
                print(f"[parse] statement {len(exprs) + 1}: {call}", file=sys.stderr)
            exprs.append(call)
        return exprs

    def _parse_call(self, tokens: List[Token], position: int, source_text: str) -> Tuple[Call, int]:
        """Parse `name ( value* )` starting at position; return the call and the position after it"""
        first = tokens[position]
        if first.type != IDENTIFIER:
            raise self._error(f"Expected identifier, got {first}",
                              ParenParseError.MISSING_IDENTIFIER, first.offset, source_text)

        after_name = position + 1
        if after_name >= len(tokens) or tokens[after_name].type != GROUP_OPEN:
            location = tokens[after_name].offset if after_name < len(tokens) else len(source_text)
            raise self._error(f"Missing opening parenthesis after '{first.value}'",
                              ParenParseError.MISSING_OPEN_PAREN, location, source_text)

        args = []
        position = after_name + 1
        while True:
            if position >= len(tokens):
                raise self._error(f"Missing closing parenthesis for '{first.value}'",
                                  ParenParseError.MISSING_CLOSE_PAREN, len(source_text), source_text)

            token = tokens[position]
            if token.type == GROUP_CLOSE:
                return Call(first.value, tuple(args)), position + 1

            if token.type == IDENTIFIER:
                next_position = position + 1
                if next_position < len(tokens) and tokens[next_position].type == GROUP_OPEN:
                    nested, position = self._parse_call(tokens, position, source_text)
                    args.append(nested)
                    continue
                args.append(Identifier(token.value))
            elif token.type in LITERAL_TOKENS:
                args.append(LITERAL_TOKENS[token.type](token.value))
            else:
                raise self._error(f"Unexpected token {token}, expected value",
                                  ParenParseError.UNEXPECTED_TOKEN, token.offset, source_text)
            position += 1

    @staticmethod
    def _error(message: str, kind: str, location: int, source_text: str) -> ParenParseError:
        return locate_parse_error(message, kind, source_text, location)


# ============================================================================
# SOURCE LOADING
# ============================================================================

def load_source(filepath: str) -> str:
    """Read the full program text of a Paren source file"""
    try:
        return Path(filepath).read_text(encoding='utf-8')
    except FileNotFoundError:
        raise ParenSourceError(f"Script file '{filepath}' not found")
    except PermissionError:
        raise ParenSourceError(f"Permission denied reading '{filepath}'")
    except UnicodeDecodeError as e:
        raise ParenSourceError(f"Cannot decode file '{filepath}': {e}")
    except OSError as e:
        raise ParenSourceError(f"Could not read '{filepath}': {e}")


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> ParenParser:
    """Create a Paren parser"""
    return ParenParser(debug=debug)


def create_debug_parser() -> ParenParser:
    """Create a Paren parser with debug enabled"""
    return ParenParser(debug=True)


def tokenize(text: str) -> List[Token]:
    """Tokenize program text"""
    return ParenTokenizer().tokenize(text)


def parse(text: str) -> List[Expression]:
    """Tokenize and parse program text into top-level calls"""
    return create_parser().parse_string(text)


def pretty_print_ast(expr: Expression, indent: int = 0) -> str:
    """Pretty print an expression tree for debugging"""
    if isinstance(expr, Call):
        result = "  " * indent + f"Call({expr.name})\n"
        for arg in expr.args:
            result += pretty_print_ast(arg, indent + 1)
        return result

    value = expr.name if isinstance(expr, Identifier) else expr.value
    return "  " * indent + f"{kind_name(expr)}({value!r})\n"
