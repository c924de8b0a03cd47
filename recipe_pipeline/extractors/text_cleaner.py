"""
Text cleaning for typed recipe text and video transcripts.

Social-media captions and speech transcripts carry noise that confuses the
parsers: links, @mentions, #hashtags, emoji, bullet glyphs and common
transcription typos. Line breaks are kept so list structure survives.
"""
from __future__ import annotations

import logging
import re
from typing import NamedTuple

_LOGGER = logging.getLogger(__name__)

_URL_RE = re.compile(r'https?://\S+|www\.\S+', re.IGNORECASE)
_MENTION_RE = re.compile(r'(?<!\w)@[\w.]+')
_HASHTAG_RE = re.compile(r'(?<!\w)#\w+')
_EMOJI_RE = re.compile(
    '['
    '\U0001F300-\U0001FAFF'  # pictographs, supplemental symbols
    '\U0001F1E0-\U0001F1FF'  # regional indicators
    '\u2600-\u27BF'  # misc symbols, dingbats
    '\uE000-\uF8FF'  # private use area
    ']'
)
_VARIATION_SELECTOR_RE = re.compile('[\uFE00-\uFE0F\u200D]')
_BULLET_GLYPH_RE = re.compile(r'^[ \t]*[•●◦▪▫■□►▶➤✓✔☐☑*]+[ \t]*', re.MULTILINE)
_SPACES_RE = re.compile(r'[ \t ]+')
_BLANK_LINES_RE = re.compile(r'\n\s*\n+')
_SPACE_BEFORE_PUNCT_RE = re.compile(r'[ \t]+([,.!?;:])')
_SPACED_FRACTION_RE = re.compile(r'(\d)\s*/\s*(\d)')
_SPACED_RANGE_RE = re.compile(r'(\d)\s*-\s*(\d)')

# Frequent OCR/speech-to-text mistakes
COMMON_ERRORS = {
    '0ne': 'one',
    'rninutes': 'minutes',
    'rnin': 'min',
    'degress': 'degrees',
    'ingrediants': 'ingredients',
    'ingredents': 'ingredients',
    'recipie': 'recipe',
    'seperate': 'separate',
    'untill': 'until',
    'tablespon': 'tablespoon',
    'teaspon': 'teaspoon',
}
_COMMON_ERRORS_RE = re.compile(
    r'\b(' + '|'.join(re.escape(error) for error in COMMON_ERRORS) + r')\b', re.IGNORECASE)


class CleanResult(NamedTuple):
    """Cleaned text and the names of the operations that changed it."""

    text: str
    operations: list[str]


def clean_text(text: str) -> CleanResult:
    """Strip social-media noise from recipe text.

    Args:
        text: Raw caption, transcript, or typed text

    Returns:
        CleanResult with the cleaned text and applied operations

    Examples:
        >>> clean_text("Best pasta 🍝 #dinner @chef\\n\\n\\n2 cups flour").text
        'Best pasta\\n\\n2 cups flour'
    """
    if not text:
        return CleanResult("", [])

    operations = []

    def apply(name, pattern, replacement, value):
        cleaned = pattern.sub(replacement, value)
        if cleaned != value:
            operations.append(name)
        return cleaned

    result = text.replace('\r\n', '\n').replace('\r', '\n')
    result = apply('url-removal', _URL_RE, ' ', result)
    result = apply('mention-removal', _MENTION_RE, ' ', result)
    result = apply('hashtag-removal', _HASHTAG_RE, ' ', result)
    result = apply('emoji-removal', _EMOJI_RE, ' ', result)
    result = _VARIATION_SELECTOR_RE.sub('', result)
    result = apply('bullet-removal', _BULLET_GLYPH_RE, '', result)
    result = apply('typo-correction', _COMMON_ERRORS_RE,
                   lambda m: COMMON_ERRORS[m.group(1).lower()], result)
    result = _SPACED_FRACTION_RE.sub(r'\1/\2', result)
    result = _SPACED_RANGE_RE.sub(r'\1-\2', result)

    # whitespace
    result = _SPACES_RE.sub(' ', result)
    result = _SPACE_BEFORE_PUNCT_RE.sub(r'\1', result)
    result = '\n'.join(line.strip() for line in result.split('\n'))
    result = _BLANK_LINES_RE.sub('\n\n', result).strip()

    _LOGGER.debug("Cleaned text from %d to %d characters (%s)",
                  len(text), len(result), ', '.join(operations) or 'no changes')
    return CleanResult(result, operations)
