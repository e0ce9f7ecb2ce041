"""
Expansion of table name wildcards into concrete table names.
"""

import fnmatch
import logging
import re


def compile_patterns(patterns: list[str]) -> list[re.Pattern]:
    """Translate fnmatch patterns ('*_old', 'tmp_*') into compiled regexes."""
    return [re.compile(fnmatch.translate(pattern)) for pattern in patterns]


def match_tables(tables: list[str], patterns: list[str]) -> list[str]:
    """Return the tables matching any pattern, in the order given."""
    compiled = compile_patterns(patterns)
    matched = []
    for table in tables:
        for pattern, regex in zip(patterns, compiled):
            if regex.match(table):
                logging.debug(f"Table '{table}' matched exclusion pattern '{pattern}'")
                matched.append(table)
                break
    return matched


def merge_ignored_tables(ignored: list[str], matched: list[str]) -> list[str]:
    """Append matched tables to the explicit list, skipping duplicates."""
    merged = list(ignored)
    for table in matched:
        if table not in merged:
            merged.append(table)
    return merged
