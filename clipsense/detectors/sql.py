from __future__ import annotations

import re

from .types import Detector, DetectorAction

SQL_RE = re.compile(
    r"\b(SELECT|INSERT\s+INTO|UPDATE|DELETE\s+FROM|CREATE\s+TABLE|ALTER\s+TABLE|DROP\s+TABLE)\b",
    re.IGNORECASE,
)

# Longer phrases first so "LEFT JOIN" is not split by "JOIN"
CLAUSE_KEYWORDS = [
    "UNION ALL", "LEFT JOIN", "RIGHT JOIN", "INNER JOIN", "OUTER JOIN",
    "GROUP BY", "ORDER BY", "INSERT INTO", "DELETE FROM", "CREATE TABLE",
    "ALTER TABLE", "DROP TABLE", "SELECT", "FROM", "WHERE", "AND", "OR",
    "JOIN", "ON", "HAVING", "LIMIT", "VALUES", "UPDATE", "SET", "UNION",
]
MAJOR_KEYWORDS = [
    "LEFT JOIN", "RIGHT JOIN", "INNER JOIN", "GROUP BY", "ORDER BY",
    "SELECT", "FROM", "WHERE", "JOIN", "HAVING", "LIMIT", "UNION", "VALUES", "SET",
]
ALL_KEYWORDS = [
    "select", "from", "where", "and", "or", "join", "on", "group by", "order by",
    "having", "limit", "insert into", "values", "update", "set", "delete from",
    "create table", "alter table", "drop table", "left join", "right join",
    "inner join", "outer join", "union", "as", "in", "not", "null", "is", "between",
    "like", "exists", "distinct", "case", "when", "then", "else", "end", "asc", "desc",
]


def _keyword_re(keyword: str) -> re.Pattern[str]:
    phrase = r"\s+".join(re.escape(word) for word in keyword.split())
    return re.compile(rf"\b{phrase}\b", re.IGNORECASE)


_CLAUSE_RES = [(kw, _keyword_re(kw)) for kw in CLAUSE_KEYWORDS]
_UPPER_RES = [(kw.upper(), _keyword_re(kw)) for kw in ALL_KEYWORDS]
_MAJOR_BREAK_RES = [
    (kw, re.compile(r"\s+" + r"\s+".join(kw.split()) + r"\b")) for kw in MAJOR_KEYWORDS
]
# Breaks before JOIN must not split "LEFT JOIN" and friends
_JOIN_ONLY_RE = re.compile(r"(?<!LEFT)(?<!RIGHT)(?<!INNER)(?<!OUTER)\s+JOIN\b")


def is_sql(text: str) -> bool:
    return SQL_RE.search(text) is not None


def uppercase_keywords(text: str) -> str:
    result = text
    for upper, pattern in _UPPER_RES:
        result = pattern.sub(upper, result)
    return result


def format_sql(text: str) -> str:
    """Uppercase clause keywords and start each major clause on its own line."""
    result = text.strip()
    for keyword, pattern in _CLAUSE_RES:
        result = pattern.sub(keyword, result)
    for keyword, pattern in _MAJOR_BREAK_RES:
        if keyword == "JOIN":
            result = _JOIN_ONLY_RE.sub("\nJOIN", result)
        else:
            result = pattern.sub(f"\n{keyword}", result)

    lines = result.split("\n")
    formatted = [lines[0]]
    for line in lines[1:]:
        stripped = line.strip()
        if any(stripped.startswith(kw) for kw in MAJOR_KEYWORDS):
            formatted.append(stripped)
        else:
            formatted.append(f"  {stripped}")
    return "\n".join(formatted)


def minify_sql(text: str) -> str:
    return " ".join(text.split())


sql_detector = Detector(
    id="sql",
    priority=8,
    detect=is_sql,
    toast_message="SQL query detected",
    suggested_language="sql",
    actions=(
        DetectorAction(id="format-sql", label="Format", execute=format_sql),
        DetectorAction(id="minify-sql", label="Minify", execute=minify_sql),
        DetectorAction(id="uppercase-keywords", label="Uppercase Keywords", execute=uppercase_keywords),
    ),
)
