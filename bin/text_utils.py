#!/usr/bin/env python3
"""
Text Utility Functions

Common text processing utilities shared across preview-sync modules.
"""

import re
import unicodedata
from typing import Optional


# Hidden characters for text cleaning
HIDDEN_CHARACTERS = {
    '\u00A0': ' ',  # Non-Breaking Space
    '\u202F': ' ',  # Narrow No-Break Space
    '\u3000': ' ',  # Ideographic Space
    '\u200B': '',   # Zero Width Space
    '\u200C': '',   # Zero Width Non-Joiner
    '\u200D': '',   # Zero Width Joiner
    '\u200E': '',   # Left-to-Right Mark
    '\u2060': '',   # Word Joiner
    '\uFEFF': '',   # BOM
    '\u00AD': '',   # Soft Hyphen
    '\u3164': ''    # Hangul Filler
}

# 문자·숫자·공백이 아닌 모든 문자 (\w 에 포함되는 '_' 도 구두점으로 취급)
_NON_WORD_RE = re.compile(r'[^\w\s]|_')


def clean_text(text: Optional[str]) -> Optional[str]:
    """
    Clean text by removing hidden characters.

    Args:
        text: The text to clean

    Returns:
        Cleaned text with hidden characters removed/replaced, or None if input is None
    """
    if text is None:
        return None

    # Apply unicodedata.normalize to prevent unmatched string comparison.
    # Use Normalization Form Canonical Composition for the unicode normalization.
    cleaned_text = unicodedata.normalize('NFC', text)
    for hidden_char, replacement in HIDDEN_CHARACTERS.items():
        cleaned_text = cleaned_text.replace(hidden_char, replacement)
    return cleaned_text


def collapse_ws(text: str) -> str:
    """연속 공백을 하나의 스페이스로 축약한다."""
    return ' '.join(text.split())


def strip_punctuation(text: str) -> str:
    """문자(모든 스크립트)·숫자·공백을 제외한 문자를 제거한다."""
    return _NON_WORD_RE.sub('', text)
