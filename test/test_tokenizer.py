"""
Tokenizer tests for the Monkey language
Tests token kinds, literals, positions and end of input handling
"""

import pytest
from parsing import Tokenizer
from tokens import Token, TokenKind, lookup_ident


def kinds_and_literals(source):
  return [(t.kind, t.literal) for t in Tokenizer(source).tokenize()]


class TestTokenKinds:
  """Test classification of source text into tokens"""

  def test_operators_and_delimiters(self):
    """Test every single and double character operator"""
    assert [kind for kind, _ in kinds_and_literals("=+(){}[],;:")] == [
        TokenKind.ASSIGN, TokenKind.PLUS, TokenKind.LPAREN, TokenKind.RPAREN,
        TokenKind.LBRACE, TokenKind.RBRACE, TokenKind.LBRACKET,
        TokenKind.RBRACKET, TokenKind.COMMA, TokenKind.SEMICOLON,
        TokenKind.COLON, TokenKind.EOF,
    ]

  def test_two_character_operators_win(self):
    """Test that == and != are not split into two tokens"""
    assert kinds_and_literals("a == b != c") == [
        (TokenKind.IDENT, "a"),
        (TokenKind.EQ, "=="),
        (TokenKind.IDENT, "b"),
        (TokenKind.NOT_EQ, "!="),
        (TokenKind.IDENT, "c"),
        (TokenKind.EOF, ""),
    ]

  def test_let_statement(self):
    """Test a complete let statement"""
    assert kinds_and_literals("let five = 5;") == [
        (TokenKind.LET, "let"),
        (TokenKind.IDENT, "five"),
        (TokenKind.ASSIGN, "="),
        (TokenKind.INT, "5"),
        (TokenKind.SEMICOLON, ";"),
        (TokenKind.EOF, ""),
    ]

  @pytest.mark.parametrize("word,kind", [
      ("fn", TokenKind.FUNCTION),
      ("let", TokenKind.LET),
      ("true", TokenKind.TRUE),
      ("false", TokenKind.FALSE),
      ("if", TokenKind.IF),
      ("else", TokenKind.ELSE),
      ("return", TokenKind.RETURN),
  ])
  def test_keywords(self, word, kind):
    """Test keyword recognition"""
    assert kinds_and_literals(word)[0] == (kind, word)

  def test_keyword_prefix_is_identifier(self):
    """Test that keywords only match whole words"""
    assert kinds_and_literals("fnord letter iffy")[:3] == [
        (TokenKind.IDENT, "fnord"),
        (TokenKind.IDENT, "letter"),
        (TokenKind.IDENT, "iffy"),
    ]

  def test_identifiers_with_underscores_and_digits(self):
    assert kinds_and_literals("_tmp x1")[:2] == [
        (TokenKind.IDENT, "_tmp"),
        (TokenKind.IDENT, "x1"),
    ]

  def test_keyword_followed_by_dollar(self):
    """Test that keyword boundaries match identifier characters"""
    assert kinds_and_literals("let$") == [
        (TokenKind.LET, "let"),
        (TokenKind.ILLEGAL, "$"),
        (TokenKind.EOF, ""),
    ]

  def test_string_literal(self):
    """Test that the literal of a string token excludes the quotes"""
    assert kinds_and_literals('"foo bar"')[0] == (TokenKind.STRING, "foo bar")

  def test_string_escapes(self):
    """Test escaped quotes inside a string"""
    assert kinds_and_literals(r'"say \"hi\""')[0] == (TokenKind.STRING, 'say "hi"')

  def test_illegal_character(self):
    """Test that unknown characters become ILLEGAL tokens"""
    assert kinds_and_literals("5 @ 5") == [
        (TokenKind.INT, "5"),
        (TokenKind.ILLEGAL, "@"),
        (TokenKind.INT, "5"),
        (TokenKind.EOF, ""),
    ]

  def test_comments_are_skipped(self):
    """Test that // comments produce no tokens"""
    assert kinds_and_literals("// a comment\n10 // trailing") == [
        (TokenKind.INT, "10"),
        (TokenKind.EOF, ""),
    ]


class TestTokenStream:
  """Test the pull interface of the tokenizer"""

  def test_positions(self):
    """Test one-based line and column numbers"""
    tokens = Tokenizer("let x\n  = 5").tokenize()
    assert [(t.line, t.column) for t in tokens[:4]] == [(1, 1), (1, 5), (2, 3), (2, 5)]

  def test_eof_forever(self):
    """Test that the tokenizer keeps returning EOF once exhausted"""
    tokenizer = Tokenizer("x")
    assert tokenizer.next_token().kind is TokenKind.IDENT
    for _ in range(3):
      assert tokenizer.next_token().kind is TokenKind.EOF

  def test_empty_source(self):
    tokens = Tokenizer("").tokenize()
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.EOF


class TestTokenHelpers:
  """Test token level helpers"""

  def test_lookup_ident(self):
    assert lookup_ident("fn") is TokenKind.FUNCTION
    assert lookup_ident("foo") is TokenKind.IDENT

  def test_kind_spelling(self):
    """Test that kinds print the way diagnostics spell them"""
    assert str(TokenKind.RBRACE) == "}"
    assert str(TokenKind.IDENT) == "IDENT"

  def test_tokens_are_immutable(self):
    token = Token(TokenKind.INT, "5")
    with pytest.raises(AttributeError):
      token.literal = "6"
