import re

# Quoted literals and identifiers are matched first so that a ``?`` inside
# them is left untouched.
QMARK = re.compile(r"""('(?:[^']|'')*'|"(?:[^"]|"")*"|`[^`]*`)|\?""")


def convert_qmark_params(query: str, positional_sub: str = r"%s") -> str:
    """Rewrite ``?`` placeholders for drivers using the ``format`` style.

    Literal ``%`` signs are doubled, since those drivers interpolate the whole
    query text once parameters are supplied.
    """
    query = query.replace("%", "%%")

    def replace(match: re.Match) -> str:
        literal = match.group(1)
        return literal if literal is not None else positional_sub

    return QMARK.sub(replace, query)
