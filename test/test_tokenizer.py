"""
Tokenizer tests for Paren
Character scanning, literal classification and token offsets
"""

import math

import pytest
from parsing import (
  ParenTokenizer, Token, tokenize,
  GROUP_OPEN, GROUP_CLOSE, IDENTIFIER, STRING, INT, LONG, DOUBLE, BOOLEAN
)


class TestTokenScanning:
  """Test splitting program text into tokens"""

  def test_simple_call(self):
    assert tokenize("print(1)") == [
      Token(IDENTIFIER, "print"),
      Token(GROUP_OPEN),
      Token(INT, 1),
      Token(GROUP_CLOSE),
    ]

  def test_empty_input(self):
    assert tokenize("") == []
    assert tokenize("  \n\n ") == []

  def test_separators(self):
    """Space, newline, tab, carriage return and comma all separate tokens"""
    tokens = tokenize("+(1,2\t3\r\n4 5)")
    values = [t.value for t in tokens if t.type == INT]
    assert values == [1, 2, 3, 4, 5]

  def test_parentheses_split_without_spaces(self):
    tokens = tokenize("f(g(x))")
    assert [t.type for t in tokens] == [
      IDENTIFIER, GROUP_OPEN, IDENTIFIER, GROUP_OPEN, IDENTIFIER, GROUP_CLOSE, GROUP_CLOSE
    ]

  def test_string_keeps_spaces_and_parentheses(self):
    tokens = tokenize('print("a (b) c")')
    assert tokens[2] == Token(STRING, "a (b) c")
    assert len(tokens) == 4

  def test_string_keeps_separators(self):
    tokens = tokenize('print("Hello, world")')
    assert tokens[2] == Token(STRING, "Hello, world")

  def test_unterminated_string_becomes_identifier(self):
    tokens = tokenize('print("abc')
    assert tokens[-1] == Token(IDENTIFIER, '"abc')

  def test_offsets(self):
    tokens = tokenize("  x(1)")
    assert [t.offset for t in tokens] == [2, 3, 4, 5]

  def test_offsets_ignored_in_equality(self):
    assert Token(INT, 1, 0) == Token(INT, 1, 10)

  def test_token_display(self):
    assert str(Token(INT, 5)) == "INT(5)"
    assert str(Token(GROUP_OPEN)) == "("
    assert str(Token(IDENTIFIER, "x")) == "IDENTIFIER('x')"


class TestLiteralClassification:
  """Test the first-match-wins classification order"""

  @pytest.fixture
  def tokenizer(self):
    return ParenTokenizer()

  @pytest.mark.parametrize("text,expected", [
    ("42", Token(INT, 42)),
    ("-7", Token(INT, -7)),
    ("+8", Token(INT, 8)),
    ("2147483647", Token(INT, 2147483647)),
    ("2147483648", Token(LONG, 2147483648)),
    ("-2147483649", Token(LONG, -2147483649)),
    ("3.14", Token(DOUBLE, 3.14)),
    ("1e3", Token(DOUBLE, 1000.0)),
    (".5", Token(DOUBLE, 0.5)),
    ("true", Token(BOOLEAN, True)),
    ("false", Token(BOOLEAN, False)),
    ('"hi"', Token(STRING, "hi")),
    ('""', Token(STRING, "")),
    ("foo", Token(IDENTIFIER, "foo")),
    ("+", Token(IDENTIFIER, "+")),
    ("==", Token(IDENTIFIER, "==")),
    ("ifElse", Token(IDENTIFIER, "ifElse")),
    ("True", Token(IDENTIFIER, "True")),
    ('"', Token(IDENTIFIER, '"')),
  ])
  def test_classify(self, tokenizer, text, expected):
    assert tokenizer.classify(text) == expected

  def test_integer_beyond_64_bits_is_double(self, tokenizer):
    token = tokenizer.classify("9223372036854775808")
    assert token.type == DOUBLE
    assert token.value == 9223372036854775808.0

  def test_special_float_names(self, tokenizer):
    assert math.isnan(tokenizer.classify("nan").value)
    assert tokenizer.classify("inf") == Token(DOUBLE, math.inf)
    assert tokenizer.classify("-infinity") == Token(DOUBLE, -math.inf)

  def test_classify_keeps_offset(self, tokenizer):
    assert tokenizer.classify("x", 7).offset == 7


class TestLiteralRoundTrip:
  """Rendering atomic tokens back to text and re-lexing keeps their classification"""

  @staticmethod
  def source_text(token):
    if token.type == BOOLEAN:
      return "true" if token.value else "false"
    if token.type == DOUBLE:
      return repr(token.value)
    return str(token.value)

  @pytest.mark.parametrize("source", [
    "42 -7 0 2147483647 -2147483648",
    "2147483648 9223372036854775807 -9223372036854775808",
    "2.5 -0.125 1e3 1e20 6.02e-23",
    "true false",
    "x foo bar_baz ifElse + ==",
  ])
  def test_round_trip(self, source):
    tokens = tokenize(source)
    rebuilt = " ".join(self.source_text(token) for token in tokens)
    assert tokenize(rebuilt) == tokens
