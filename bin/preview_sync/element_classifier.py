"""Element Type Classifier — 소스 라인이 렌더링될 요소 종류(CSS selector) 후보를 추정한다.

분류 결과는 ElementResolver 의 탐색 범위를 좁히기 위한 휴리스틱일 뿐,
정확성을 보장하지 않는다. 각 패턴 검사는 서로 독립적이며 중복 적용된다.
"""
import re
from typing import List, Optional, Tuple

# 항상 포함되는 일반 텍스트 컨테이너
BASELINE_KINDS = ('p', 'li', 'span', 'div')

HEADING_KINDS = ('h1', 'h2', 'h3', 'h4', 'h5', 'h6')
LIST_KINDS = ('li', 'ul', 'ol')
TABLE_KINDS = ('table', 'tr', 'td', 'th')
QUOTE_KINDS = ('blockquote', 'aside')
CODE_KINDS = ('code', 'pre')
LINK_KINDS = ('a',)
IMAGE_KINDS = ('img',)
VIDEO_KINDS = ('video', 'iframe', '.video-container', '.lazy-video-container')
EMPHASIS_KINDS = ('strong', 'em', 'b', 'i', 's', 'del')
DETAILS_KINDS = ('details', 'summary')

MEDIA_EXTENSIONS = ('mp4', 'webm', 'mov', 'ogg', 'ogv', 'm4v', 'mkv', 'avi')
MEDIA_HOSTS = (
    'youtube.com', 'youtu.be', 'vimeo.com', 'dailymotion.com', 'twitch.tv', 'loom.com',
)

_HEADING_RE = re.compile(r'^(#{1,6})\s')
_LIST_RE = re.compile(r'^\s*(?:[-*+]|\d+[.)])\s+|\[list(?:=[^\]]*)?\]|\[\*\]', re.IGNORECASE)
_QUOTE_RE = re.compile(r'^\s*>|\[quote(?:=[^\]]*)?\]', re.IGNORECASE)
_CODE_RE = re.compile(r'`|\[code\]|<code>|<pre>', re.IGNORECASE)
_LINK_RE = re.compile(r'(?<!!)\[[^\]]+\]\([^)]*\)|\[url(?:=[^\]]*)?\]|<a\s', re.IGNORECASE)
_IMAGE_RE = re.compile(r'!\[[^\]]*\]\([^)]*\)|\[img(?:=[^\]]*)?\]|<img\s', re.IGNORECASE)
_VIDEO_TAG_RE = re.compile(r'\[(?:video|youtube)(?:=[^\]]*)?\]|<video|<iframe', re.IGNORECASE)
_MEDIA_EXT_RE = re.compile(r'\.(?:' + '|'.join(MEDIA_EXTENSIONS) + r')\b', re.IGNORECASE)
_EMPHASIS_RE = re.compile(r'\*\*|__|~~|(?<![\s*])\*(?!\s)|\[(?:b|i|u|s|strike)\]', re.IGNORECASE)
_DETAILS_RE = re.compile(r'\[details(?:=[^\]]*)?\]|<details|<summary', re.IGNORECASE)
_TABLE_SEPARATOR_RE = re.compile(r'^\s*\|?\s*:?-{3,}:?\s*(?:\|\s*:?-{3,}:?\s*)*\|?\s*$')
# 파이프 개수를 셀 때 제외하는 인라인 구문 (이미지 크기 접미사 "alt|690x388", 코드 스팬)
_PIPE_NEUTRAL_RE = re.compile(r'!\[[^\]]*\]\([^)]*\)|`[^`]*`')


def _add(kinds: List[str], extra: Tuple[str, ...]):
    for kind in extra:
        if kind not in kinds:
            kinds.append(kind)


def is_media_line(raw_line: str) -> bool:
    """비디오 마크업, 미디어 확장자, 미디어 호스트 중 하나라도 포함하면 True."""
    if not raw_line:
        return False
    if _VIDEO_TAG_RE.search(raw_line) or _MEDIA_EXT_RE.search(raw_line):
        return True
    lowered = raw_line.lower()
    return any(host in lowered for host in MEDIA_HOSTS)


def is_table_line(raw_line: str) -> bool:
    return bool(raw_line) and '|' in raw_line


def is_table_row(raw_line: str) -> bool:
    """셀 구분자로 | 를 쓰는 테이블 행인지 판단한다. 일반 문장 속 단일 | 는 제외한다."""
    if not raw_line:
        return False
    s = _PIPE_NEUTRAL_RE.sub('', raw_line).strip()
    return s.startswith('|') or s.count('|') >= 2


def is_table_separator(raw_line: str) -> bool:
    """Markdown table separator 행 (| --- | :---: |) 여부."""
    if not raw_line or '|' not in raw_line:
        return False
    return bool(_TABLE_SEPARATOR_RE.match(raw_line))


def heading_level(raw_line: str) -> int:
    m = _HEADING_RE.match(raw_line or '')
    return len(m.group(1)) if m else 0


def classify(raw_line: str) -> Tuple[str, ...]:
    """라인 원문으로부터 후보 요소 종류를 순서대로 반환한다."""
    kinds: List[str] = list(BASELINE_KINDS)
    if not raw_line:
        return tuple(kinds)

    level = heading_level(raw_line)
    if level:
        _add(kinds, (f'h{level}',))
    if _LIST_RE.search(raw_line):
        _add(kinds, LIST_KINDS)
    if is_table_line(raw_line):
        _add(kinds, TABLE_KINDS)
    if _QUOTE_RE.search(raw_line):
        _add(kinds, QUOTE_KINDS)
    if _CODE_RE.search(raw_line):
        _add(kinds, CODE_KINDS)
    if _LINK_RE.search(raw_line):
        _add(kinds, LINK_KINDS)
    if _IMAGE_RE.search(raw_line):
        _add(kinds, IMAGE_KINDS)
    if is_media_line(raw_line):
        _add(kinds, VIDEO_KINDS)
    if _EMPHASIS_RE.search(raw_line):
        _add(kinds, EMPHASIS_KINDS)
    if _DETAILS_RE.search(raw_line):
        _add(kinds, DETAILS_KINDS)
    return tuple(kinds)


def classify_construct(raw_line: str) -> Optional[str]:
    """특수 구문 규칙 대상이면 그 종류를 반환한다.

    우선순위: details > table > media > image
    """
    if not raw_line:
        return None
    if _DETAILS_RE.search(raw_line):
        return 'details'
    if is_table_row(raw_line):
        return 'table'
    if is_media_line(raw_line):
        return 'media'
    if _IMAGE_RE.search(raw_line):
        return 'image'
    return None
