"""
Token Stream

Splits line-oriented mocap text into whitespace-separated tokens, keeping
line numbers for error messages.
"""

from dataclasses import dataclass
from typing import List, Optional

from .errors import FormatError, NumericParseError


@dataclass(frozen=True)
class Token:
    """A single whitespace-delimited token."""
    text: str
    line: int    # 1-based line number in the source text
    column: int  # 0-based token position within the line


@dataclass
class TokenLine:
    """All tokens of one non-empty source line."""
    number: int
    tokens: List[Token]

    def __len__(self) -> int:
        return len(self.tokens)

    @property
    def keyword(self) -> str:
        return self.tokens[0].text

    @property
    def words(self) -> List[str]:
        return [token.text for token in self.tokens]

    def token(self, index: int) -> Token:
        """
        Token at a position in the line.

        Raises:
            FormatError: If the line has too few tokens
        """
        if index >= len(self.tokens):
            raise FormatError(
                f"expected at least {index + 1} values after '{self.keyword}'",
                line=self.number,
            )
        return self.tokens[index]

    def read_float(self, index: int) -> float:
        token = self.token(index)
        try:
            return float(token.text)
        except ValueError:
            raise NumericParseError(
                f"expected a number, found '{token.text}'", line=token.line, token=token.text
            ) from None

    def read_floats(self, start: int, count: int) -> List[float]:
        return [self.read_float(start + i) for i in range(count)]

    def read_int(self, index: int) -> int:
        token = self.token(index)
        try:
            return int(token.text)
        except ValueError:
            raise NumericParseError(
                f"expected an integer, found '{token.text}'", line=token.line, token=token.text
            ) from None


class TokenStream:
    """
    Cursor over the tokenized lines of a text.

    Blank lines and lines starting with '#' are dropped up front.
    """

    def __init__(self, text: str):
        """
        Tokenize text.

        Args:
            text: Full file contents
        """
        self.lines: List[TokenLine] = []
        self._index = 0

        for number, raw in enumerate(text.splitlines(), start=1):
            words = raw.split()
            if not words or words[0].startswith('#'):
                continue
            tokens = [Token(word, number, column) for column, word in enumerate(words)]
            self.lines.append(TokenLine(number, tokens))

    def done(self) -> bool:
        return self._index >= len(self.lines)

    def peek_line(self) -> Optional[TokenLine]:
        """Next line without consuming it, None at end of input."""
        if self.done():
            return None
        return self.lines[self._index]

    def next_line(self) -> TokenLine:
        """
        Consume and return the next line.

        Raises:
            FormatError: At end of input
        """
        if self.done():
            last = self.lines[-1].number if self.lines else None
            raise FormatError("unexpected end of input", line=last)
        line = self.lines[self._index]
        self._index += 1
        return line

    def expect_line(self, keyword: str) -> TokenLine:
        """
        Consume a line that must start with keyword.

        Raises:
            FormatError: If the next line starts with anything else
        """
        line = self.next_line()
        if line.keyword != keyword:
            raise FormatError(
                f"expected '{keyword}', found '{line.keyword}'", line=line.number, token=line.keyword
            )
        return line

    def skip_until_section(self) -> int:
        """
        Skip lines until the next ':section' line or end of input.

        Returns:
            Number of lines skipped
        """
        skipped = 0
        while not self.done() and not self.lines[self._index].keyword.startswith(':'):
            self._index += 1
            skipped += 1
        return skipped
