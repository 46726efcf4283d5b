"""
CSV line tokenizer.

Splits one physical line into fields, honoring double-quoted spans:
- The delimiter inside quotes is part of the value
- A doubled quote inside quotes is a literal quote
- Every field is stripped of surrounding whitespace

Column count checks are left to the caller.
"""

QUOTE_CHAR = '"'


def parse_csv_line(line, delimiter=','):
    """
    Split a CSV line into trimmed fields.

    Args:
        line: One line of text (no line terminator)
        delimiter: Single-character field delimiter

    Returns:
        list: Field strings in column order

    Example:
        'value1,"value 2, with comma",value3'
        -> ['value1', 'value 2, with comma', 'value3']
    """
    columns = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == QUOTE_CHAR:
            if in_quotes and i + 1 < len(line) and line[i + 1] == QUOTE_CHAR:
                current.append(QUOTE_CHAR)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            columns.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    columns.append(''.join(current).strip())
    return columns
