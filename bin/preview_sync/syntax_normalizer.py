"""Syntax Normalizer — 마크업 문법을 제거하여 비교용 정규화 텍스트를 만든다.

소스 라인(Markdown + BBCode)과 렌더링된 프리뷰 노드의 텍스트를 같은 형태로
맞추기 위해 사용한다. 결과 문자열은 비교에만 쓰이며 저장하지 않는다.
"""
import re
import unicodedata

from text_utils import clean_text, collapse_ws, strip_punctuation


# Discourse 가 지원하는 BBCode 태그
BBCODE_TAGS = (
    'b', 'i', 'u', 's', 'strike', 'code', 'pre', 'quote', 'img', 'url', 'link',
    'email', 'size', 'color', 'centre', 'center', 'right', 'left', 'indent',
    'list', 'ul', 'ol', 'li', 'table', 'tr', 'td', 'th', 'spoiler', 'details',
    'summary', 'poll', 'date', 'time', 'hide', 'blur', 'video', 'youtube',
)

_BBCODE_TAG_RE = re.compile(
    r'\[/?(?:' + '|'.join(BBCODE_TAGS) + r')(?:=[^\]]*)?\s*/?\]|\[\*\]',
    re.IGNORECASE,
)
# [img]url[/img] 본문은 URL 뿐이므로 통째로 제거
_BBCODE_IMG_BODY_RE = re.compile(r'\[img(?:=[^\]]*)?\].*?\[/img\]', re.IGNORECASE)

_CODE_SPAN_RE = re.compile(r'`([^`]+)`')
_BOLD_ITALIC_RE = re.compile(r'\*\*\*(.+?)\*\*\*')
_BOLD_RE = re.compile(r'\*\*(.+?)\*\*')
_UNDERLINE_BOLD_RE = re.compile(r'__(.+?)__')
_STRIKE_RE = re.compile(r'~~(.+?)~~')
_ITALIC_RE = re.compile(r'(?<!\*)\*(?![\s*])(.+?)(?<![\s*])\*(?!\*)')
_UNDERLINE_ITALIC_RE = re.compile(r'(?<!\w)_(?!\s)([^_]+?)(?<!\s)_(?!\w)')
_CODE_FENCE_RE = re.compile(r'^\s*(```|~~~)\S*\s*$')

_QUOTE_MARKER_RE = re.compile(r'^\s*(?:>\s?)+')
_HEADING_MARKER_RE = re.compile(r'^\s*#{1,6}\s+')
_LIST_MARKER_RE = re.compile(r'^\s*(?:[-*+]|\d+[.)])\s+')

_UPLOADING_RE = re.compile(r'\[Uploading:[^\]]*\]\(\)', re.IGNORECASE)
_IMAGE_RE = re.compile(r'!\[([^\]]*)\]\([^)]*\)')
_LINK_RE = re.compile(r'\[([^\]]+)\]\([^)]*\)')
_INLINE_FOOTNOTE_RE = re.compile(r'\^\[([^\]]+)\]')
_FOOTNOTE_REF_RE = re.compile(r'\[\^([^\]]+)\]')
_HTML_TAG_RE = re.compile(r'<[^>]+>')
_UPLOAD_URL_RE = re.compile(r'upload://\S+')


def _image_label(match: re.Match) -> str:
    # Discourse 이미지 alt 는 "alt|690x388" 형태로 크기를 덧붙인다
    return match.group(1).split('|')[0]


def strip(raw_text: str) -> str:
    """라인 또는 요소 텍스트에서 마크업 문법을 제거한 평문을 반환한다."""
    if not raw_text:
        return ''
    s = raw_text
    if _CODE_FENCE_RE.match(s):
        return ''

    s = _BBCODE_IMG_BODY_RE.sub('', s)
    s = _BBCODE_TAG_RE.sub('', s)

    s = _CODE_SPAN_RE.sub(r'\1', s)
    s = _BOLD_ITALIC_RE.sub(r'\1', s)
    s = _BOLD_RE.sub(r'\1', s)
    s = _UNDERLINE_BOLD_RE.sub(r'\1', s)
    s = _STRIKE_RE.sub(r'\1', s)

    # 리스트 마커 "* item" 은 italic 으로 오인하지 않도록 먼저 제거
    s = _QUOTE_MARKER_RE.sub('', s)
    s = _HEADING_MARKER_RE.sub('', s)
    s = _LIST_MARKER_RE.sub('', s)

    s = _ITALIC_RE.sub(r'\1', s)
    s = _UNDERLINE_ITALIC_RE.sub(r'\1', s)

    s = _UPLOADING_RE.sub('', s)
    s = _IMAGE_RE.sub(_image_label, s)
    s = _LINK_RE.sub(r'\1', s)
    s = _INLINE_FOOTNOTE_RE.sub(r'\1', s)
    s = _FOOTNOTE_REF_RE.sub(r'\1', s)
    s = _HTML_TAG_RE.sub('', s)
    s = _UPLOAD_URL_RE.sub('', s)
    s = s.replace('|', ' ')
    return s.strip()


def normalize(text: str) -> str:
    """비교용 정규화: 소문자화, 구두점 제거, 공백 축약, 양끝 공백 제거.

    구두점 제거 후 공백을 축약해야 normalize(normalize(s)) == normalize(s) 가 성립한다.
    구두점이 빠지면서 인접하게 된 결합 문자열(예: 한글 자모)은 NFC 로 다시 합성한다.
    """
    if not text:
        return ''
    s = clean_text(text).lower()
    s = unicodedata.normalize('NFC', strip_punctuation(s))
    return collapse_ws(s)


def normalize_markup(raw_text: str) -> str:
    return normalize(strip(raw_text))
