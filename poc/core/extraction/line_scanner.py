"""
Line scanner for semi-structured command output

Diagnostic tools print blocks of "Label . . . : value" lines, often with
several adapters or networks one after another. LineScanner restricts the
lines offered to a matcher to one such block and returns the first value the
matcher accepts.
"""

import re
from typing import Callable, Iterator, Optional, Pattern, Union


LinePredicate = Callable[[str], bool]
FieldMatcher = Callable[[str], Optional[str]]


class LineScanner:
    """
    Scan text line by line, optionally scoped to a section.

    Without section_start every line is offered. With section_start the
    scanner is inactive until the first line satisfying it, then offers the
    following lines until one satisfies section_end, where scanning stops.
    The start line itself is never offered.
    """

    def __init__(self, section_start: Optional[LinePredicate] = None,
                 section_end: Optional[LinePredicate] = None):
        self.section_start = section_start
        self.section_end = section_end

    def lines(self, text: Optional[str]) -> Iterator[str]:
        if not text:
            return
        active = self.section_start is None
        for line in text.splitlines():
            if not active:
                if self.section_start(line):
                    active = True
                continue
            if self.section_end is not None and self.section_end(line):
                return
            yield line

    def find_field(self, text: Optional[str], match: FieldMatcher) -> Optional[str]:
        """First non-empty value produced by match, in line order"""
        for line in self.lines(text):
            value = match(line)
            if value:
                return value
        return None


def find_field(text: Optional[str], match: FieldMatcher,
               section_start: Optional[LinePredicate] = None,
               section_end: Optional[LinePredicate] = None) -> Optional[str]:
    return LineScanner(section_start, section_end).find_field(text, match)


def contains(*words: str) -> LinePredicate:
    """Predicate true when the line contains every word"""
    def predicate(line: str) -> bool:
        return all(word in line for word in words)
    return predicate


def labelled(label: Union[str, Pattern], convert: Optional[FieldMatcher] = None,
             anchored: bool = True) -> FieldMatcher:
    """
    Matcher for "Label : value" lines.

    The value is everything after the first colon following the label,
    stripped. convert, when given, validates/normalizes the raw value and
    may reject it by returning None.
    """
    if isinstance(label, str):
        label = re.compile(re.escape(label), re.IGNORECASE)
    prefix = r'^\s*' if anchored else ''
    pattern = re.compile(prefix + r'(?:' + label.pattern + r')[^:\n]*:(.*)$', label.flags)

    def match(line: str) -> Optional[str]:
        m = pattern.search(line)
        if not m:
            return None
        value = m.group(1).strip()
        if not value:
            return None
        return convert(value) if convert else value
    return match
