"""
SqlScanner: top-level clause detection for SELECT statements.

Splits a statement into tokens while skipping string literals, quoted
identifiers, comments and parenthesised sub-expressions, then locates the
clause boundaries the count deriver and the bounded rewriter rely on.
Only the outermost SELECT is analysed; nothing here is a general SQL parser.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import UnsupportedStatementError

WORD = "word"
IDENT = "ident"
LITERAL = "literal"
PARAM = "param"
PUNCT = "punct"

# Closing delimiter for each quoting style
_QUOTES = {"'": "'", '"': '"', "`": "`", "[": "]"}
_QUOTE_CHARS = "\"`[]"

COMPOUND_KEYWORDS = frozenset({"UNION", "INTERSECT", "EXCEPT", "MINUS"})
LIMIT_KEYWORDS = frozenset({"LIMIT", "OFFSET", "FETCH"})

# Words that may precede a column called LIMIT, OFFSET or FETCH
OPERAND_KEYWORDS = frozenset({
    "SELECT", "WHERE", "AND", "OR", "NOT", "ON", "BY", "WHEN", "THEN",
    "ELSE", "IS", "IN", "LIKE", "BETWEEN", "AS", "HAVING", "SET",
})


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    start: int
    end: int
    depth: int

    @property
    def upper(self) -> str:
        return self.text.upper()


def _find_closing(sql: str, start: int, closing: str) -> int:
    """Return the index just past the closing quote, honouring doubled quotes."""
    pos = start + 1
    while True:
        idx = sql.find(closing, pos)
        if idx == -1:
            raise UnsupportedStatementError(
                "Unterminated quoted text in statement",
                details={"position": start},
            )
        if closing != "]" and sql.startswith(closing * 2, idx):
            pos = idx + 2
            continue
        return idx + 1


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def tokenize(sql: str) -> list[Token]:
    """Tokenize a statement, dropping whitespace and comments.

    Raises:
        UnsupportedStatementError: on unterminated quotes or comments and
            unbalanced parentheses.
    """
    tokens: list[Token] = []
    depth = 0
    i = 0
    n = len(sql)
    while i < n:
        ch = sql[i]
        if ch.isspace():
            i += 1
            continue

        if sql.startswith("--", i):
            newline = sql.find("\n", i)
            i = n if newline == -1 else newline + 1
            continue
        if sql.startswith("/*", i):
            close = sql.find("*/", i + 2)
            if close == -1:
                raise UnsupportedStatementError(
                    "Unterminated block comment in statement",
                    details={"position": i},
                )
            i = close + 2
            continue

        if ch in _QUOTES:
            end = _find_closing(sql, i, _QUOTES[ch])
            kind = LITERAL if ch == "'" else IDENT
            tokens.append(Token(kind, sql[i:end], i, end, depth))
            i = end
            continue

        if ch == "(":
            tokens.append(Token(PUNCT, ch, i, i + 1, depth))
            depth += 1
            i += 1
            continue
        if ch == ")":
            depth -= 1
            if depth < 0:
                raise UnsupportedStatementError(
                    "Unbalanced parentheses in statement",
                    details={"position": i},
                )
            tokens.append(Token(PUNCT, ch, i, i + 1, depth))
            i += 1
            continue

        # Placeholders: ?, ?NNN, :name, @name, $1, %s, %(name)s
        if ch == "?":
            j = i + 1
            while j < n and sql[j].isdigit():
                j += 1
            tokens.append(Token(PARAM, sql[i:j], i, j, depth))
            i = j
            continue
        if (
            ch in ":@$"
            and i + 1 < n
            and _is_name_char(sql[i + 1])
            and not (ch == ":" and i > 0 and sql[i - 1] == ":")
        ):
            j = i + 1
            while j < n and _is_name_char(sql[j]):
                j += 1
            tokens.append(Token(PARAM, sql[i:j], i, j, depth))
            i = j
            continue
        if ch == "%" and sql.startswith("%s", i):
            tokens.append(Token(PARAM, "%s", i, i + 2, depth))
            i += 2
            continue
        if ch == "%" and sql.startswith("%(", i):
            close = sql.find(")s", i)
            if close != -1:
                tokens.append(Token(PARAM, sql[i:close + 2], i, close + 2, depth))
                i = close + 2
                continue

        if ch.isalpha() or ch == "_":
            j = i + 1
            while j < n and (_is_name_char(sql[j]) or sql[j] == "$"):
                j += 1
            tokens.append(Token(WORD, sql[i:j], i, j, depth))
            i = j
            continue
        if ch.isdigit():
            j = i + 1
            while j < n and (_is_name_char(sql[j]) or sql[j] == "."):
                j += 1
            tokens.append(Token(LITERAL, sql[i:j], i, j, depth))
            i = j
            continue

        tokens.append(Token(PUNCT, ch, i, i + 1, depth))
        i += 1

    if depth != 0:
        raise UnsupportedStatementError(
            "Unbalanced parentheses in statement",
            details={"open": depth},
        )
    return tokens


@dataclass(frozen=True)
class SelectStatement:
    """Clause boundaries of a top-level SELECT.

    `body_end` marks the end of the last token before any ORDER BY / LIMIT
    tail, so trailing comments never end up in a rewritten statement.
    """

    sql: str
    from_start: int
    body_end: int
    end: int
    bounded: bool
    wrap_reasons: tuple[str, ...]
    projection_has_params: bool
    tail_has_params: bool

    @property
    def body(self) -> str:
        """Statement up to, not including, the ordering/limiting tail."""
        return self.sql[:self.body_end]

    @property
    def source(self) -> str:
        """The FROM ... WHERE ... portion of the statement."""
        return self.sql[self.from_start:self.body_end]

    @property
    def text(self) -> str:
        """Whole statement without terminator or trailing comments."""
        return self.sql[:self.end]

    @property
    def needs_wrap(self) -> bool:
        return bool(self.wrap_reasons) or self.projection_has_params


def _next_token(tokens: list[Token], index: int) -> Token | None:
    return tokens[index + 1] if index + 1 < len(tokens) else None


def _starts_limit_clause(tokens: list[Token], index: int) -> bool:
    """True when LIMIT/OFFSET/FETCH at `index` is a keyword, not a column name."""
    prev = tokens[index - 1]
    nxt = _next_token(tokens, index)
    if nxt is None:
        return False
    if prev.kind == PUNCT and prev.text != ")":
        return False
    if prev.kind == WORD and prev.upper in OPERAND_KEYWORDS:
        return False
    return nxt.kind != PUNCT or nxt.text in ("(", "-", "+")


def parse_select(sql: str) -> SelectStatement:
    """Locate the clause boundaries of a top-level SELECT statement.

    Raises:
        UnsupportedStatementError: if the statement is not a single plain
            SELECT with a FROM clause.
    """
    tokens = tokenize(sql)
    if tokens and tokens[-1].kind == PUNCT and tokens[-1].text == ";":
        tokens = tokens[:-1]
    if not tokens:
        raise UnsupportedStatementError("Empty statement cannot be paginated")
    if any(t.kind == PUNCT and t.text == ";" for t in tokens):
        raise UnsupportedStatementError("Multiple statements cannot be paginated")

    first = tokens[0]
    if first.kind != WORD or first.upper != "SELECT":
        raise UnsupportedStatementError(
            "Only a plain top-level SELECT can be paginated",
            details={"starts_with": first.text},
        )

    wrap_reasons: list[str] = []
    from_index: int | None = None
    tail_index: int | None = None
    bounded = False

    for idx, tok in enumerate(tokens):
        if tok.depth != 0 or tok.kind != WORD:
            continue
        word = tok.upper
        if word in COMPOUND_KEYWORDS:
            raise UnsupportedStatementError(
                f"Compound {word} statements cannot be paginated",
                details={"position": tok.start},
            )
        if from_index is None:
            if word == "FROM":
                from_index = idx
            elif word == "DISTINCT" and idx == 1:
                wrap_reasons.append("distinct")
            continue

        nxt = _next_token(tokens, idx)
        if word == "ORDER" and nxt is not None and nxt.upper == "BY":
            if tail_index is None:
                tail_index = idx
        elif word in LIMIT_KEYWORDS and _starts_limit_clause(tokens, idx):
            bounded = True
            if tail_index is None:
                tail_index = idx
        elif tail_index is None:
            if word == "GROUP" and nxt is not None and nxt.upper == "BY":
                wrap_reasons.append("group_by")
            elif word in ("HAVING", "WINDOW", "QUALIFY"):
                wrap_reasons.append(word.lower())

    if from_index is None:
        raise UnsupportedStatementError("Statement has no top-level FROM clause")

    # Any function call may aggregate or expand rows; only a wrapped count
    # is exact for those
    projection_has_params = False
    for idx in range(1, from_index):
        tok = tokens[idx]
        if tok.kind == PARAM:
            projection_has_params = True
        elif tok.kind in (WORD, IDENT):
            nxt = _next_token(tokens, idx)
            if tok.upper == "OVER":
                wrap_reasons.append("window_function")
            elif nxt is not None and nxt.text == "(":
                name = tok.text.strip(_QUOTE_CHARS).lower()
                wrap_reasons.append(f"function:{name}")

    if tail_index is None:
        body_end = tokens[-1].end
        tail_has_params = False
    else:
        body_end = tokens[tail_index - 1].end
        tail_has_params = any(t.kind == PARAM for t in tokens[tail_index:])

    return SelectStatement(
        sql=sql,
        from_start=tokens[from_index].start,
        body_end=body_end,
        end=tokens[-1].end,
        bounded=bounded,
        wrap_reasons=tuple(dict.fromkeys(wrap_reasons)),
        projection_has_params=projection_has_params,
        tail_has_params=tail_has_params,
    )
