"""Split SQL scripts into executable units.

Two boundary rules are supported:
- plain scripts (domains, tables): a line ending in ';' closes a statement
- procedure scripts: each CREATE OR ALTER PROCEDURE line opens a new block,
  because procedure bodies contain ';' on many internal lines

Both are line-granular heuristics, not a SQL grammar. A ';' inside a string
literal at line end, or inside a /* */ block, will end a statement early.
"""
from __future__ import annotations

TERMINATOR = ";"
LINE_COMMENT = "--"
PROCEDURE_MARKER = "CREATE OR ALTER PROCEDURE"


def _is_comment_or_blank(line: str) -> bool:
    return not line.strip() or line.lstrip().startswith(LINE_COMMENT)


def split_sql_statements(content: str) -> list[str]:
    """Split SQL content into individual statements.

    Comments and blank lines never end a statement; they stay attached to
    the statement that follows them. The terminator is removed from each
    statement. Trailing text without a terminator becomes the last statement.

    Args:
        content: SQL script text

    Returns:
        Statements in script order

    Example:
        >>> split_sql_statements("-- c\\nSELECT 1;\\n")
        ['-- c\\nSELECT 1']
    """
    statements = []
    buffer: list[str] = []
    has_sql = False

    for line in content.splitlines():
        buffer.append(line)

        if _is_comment_or_blank(line):
            continue

        has_sql = True

        if line.rstrip().endswith(TERMINATOR):
            statement = "\n".join(buffer).strip()
            if statement.endswith(TERMINATOR):
                statement = statement[:-len(TERMINATOR)].rstrip()
            if statement.strip():
                statements.append(statement)
            buffer = []
            has_sql = False

    # Statement without a terminator at end of file
    if has_sql:
        rest = "\n".join(buffer).strip()
        if rest:
            statements.append(rest)

    return statements


def extract_procedure_blocks(content: str) -> list[str]:
    """Split a procedures script into one block per procedure definition.

    A block runs from a CREATE OR ALTER PROCEDURE line up to the next one
    or end of file. Anything before the first marker is dropped.

    Args:
        content: SQL script text

    Returns:
        Procedure definitions in script order, each trimmed
    """
    blocks = []
    buffer: list[str] = []
    in_procedure = False

    for line in content.splitlines():
        if line.lstrip().upper().startswith(PROCEDURE_MARKER):
            if in_procedure:
                _flush_block(buffer, blocks)
                buffer = []
            in_procedure = True

        if in_procedure:
            buffer.append(line)

    if in_procedure:
        _flush_block(buffer, blocks)

    return blocks


def _flush_block(buffer: list[str], blocks: list[str]) -> None:
    block = "\n".join(buffer).strip()
    if block:
        blocks.append(block)
