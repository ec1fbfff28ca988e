"""Special Constructs — 평문 매칭만으로는 신뢰할 수 없는 구문의 구조 기반 해석 규칙.

대상:
  details  접을 수 있는 섹션. 제목 텍스트를 summary 요소 텍스트와 비교한다.
  table    라인을 셀 단위로 나누어 프리뷰 tr 의 셀과 겹침을 비교한다.
  media    텍스트가 거의 없으므로 문서 내 순서(N 번째 미디어)로 대응시킨다.
  image    이미지 label 을 렌더링된 alt 텍스트와 비교한다.

각 규칙은 대응 요소를 찾으면 일반 콘텐츠 매칭보다 우선한다.
찾지 못하면 None 을 반환하고, 호출 측이 일반 매칭으로 넘어간다.
"""
import logging
import re
from typing import Callable, Dict, List, Optional

from bs4 import Tag

from preview_sync.element_classifier import is_media_line, is_table_separator
from preview_sync.match_scorer import is_accepted, score
from preview_sync.syntax_normalizer import normalize, normalize_markup
from preview_sync.text_position import TextPositionIndex

logger = logging.getLogger(__name__)

MEDIA_SELECTOR = 'video, iframe, .video-container, .lazy-video-container'

_DETAILS_BBCODE_RE = re.compile(
    r'\[details(?:=\s*["\']?([^\]"\']*)["\']?)?\s*\](.*)', re.IGNORECASE)
_SUMMARY_HTML_RE = re.compile(r'<summary[^>]*>(.*?)(?:</summary>|$)', re.IGNORECASE)
_DETAILS_HTML_RE = re.compile(r'<details[^>]*>(.*)', re.IGNORECASE)
_IMAGE_LABEL_RE = re.compile(r'!\[([^\]]*)\]\([^)]*\)')
_IMG_ALT_ATTR_RE = re.compile(r'<img\s[^>]*alt=["\']([^"\']*)["\']', re.IGNORECASE)


def details_title(raw_line: str) -> str:
    """[details="Title"], <summary>Title</summary>, <details>Title 에서 제목을 추출한다."""
    m = _DETAILS_BBCODE_RE.search(raw_line)
    if m:
        return (m.group(1) or m.group(2) or '').strip()
    m = _SUMMARY_HTML_RE.search(raw_line)
    if m:
        return m.group(1).strip()
    m = _DETAILS_HTML_RE.search(raw_line)
    if m:
        return m.group(1).strip()
    return ''


def table_cells(raw_line: str) -> List[str]:
    """테이블 행 라인을 정규화된 셀 텍스트 목록으로 나눈다. 빈 셀은 제외한다."""
    s = raw_line.strip()
    if s.startswith('|'):
        s = s[1:]
    if s.endswith('|'):
        s = s[:-1]
    cells = [normalize_markup(c) for c in s.split('|')]
    return [c for c in cells if c]


def image_label(raw_line: str) -> str:
    m = _IMAGE_LABEL_RE.search(raw_line)
    if m:
        # "alt|690x388" 의 크기 접미사 제거
        return m.group(1).split('|')[0].strip()
    m = _IMG_ALT_ATTR_RE.search(raw_line)
    if m:
        return m.group(1).strip()
    return ''


def _cell_overlaps(cell: str, row_cells: List[str]) -> bool:
    return any(cell == rc or cell in rc or rc in cell for rc in row_cells)


def _is_descendant_of_any(node: Tag, others: List[Tag]) -> bool:
    return any(p is o for p in node.parents for o in others)


def _is_anchored_table_line(index: TextPositionIndex, raw_line: str, line: int) -> bool:
    """| 로 시작하거나 바로 위/아래 라인이 separator 행이면 테이블 구성 라인으로 본다."""
    if raw_line.strip().startswith('|'):
        return True
    return any(is_table_separator(index.text_of_line(n)) for n in (line - 1, line + 1))


def resolve_details(tree: Tag, index: TextPositionIndex, raw_line: str, line: int,
                    threshold: float) -> Optional[Tag]:
    title = normalize_markup(details_title(raw_line))
    if not title:
        return None

    best: Optional[Tag] = None
    best_score = 0.0
    for summary in tree.find_all('summary'):
        s = score(title, normalize(summary.get_text()))
        if s > best_score and is_accepted(s, threshold):
            best_score = s
            best = summary
    if best is None:
        return None
    # 중첩된 details 에서도 summary 의 직계 details 가 대상
    return best.find_parent('details') or best


def resolve_table(tree: Tag, index: TextPositionIndex, raw_line: str, line: int,
                  threshold: float) -> Optional[Tag]:
    first_table = tree.find('table')
    if first_table is None:
        return None
    if is_table_separator(raw_line):
        return first_table

    cells = table_cells(raw_line)
    best_row: Optional[Tag] = None
    best_overlap = 0
    for row in tree.find_all('tr'):
        row_cells = [normalize(c.get_text()) for c in row.find_all(['td', 'th'])]
        row_cells = [c for c in row_cells if c]
        if not row_cells:
            continue
        overlap = sum(1 for c in cells if _cell_overlaps(c, row_cells))
        if overlap > best_overlap:
            best_overlap = overlap
            best_row = row

    if best_row is not None:
        return best_row
    if not _is_anchored_table_line(index, raw_line, line):
        # "a | b | c" 같은 일반 문장은 일반 매칭으로 넘긴다
        return None
    logger.debug(f"table 행 매칭 실패, 첫 번째 table 로 대체: line {line}")
    return first_table


def resolve_media(tree: Tag, index: TextPositionIndex, raw_line: str, line: int,
                  threshold: float) -> Optional[Tag]:
    media: List[Tag] = []
    for node in tree.select(MEDIA_SELECTOR):
        # lazy-video-container 안의 iframe 처럼 중첩된 미디어는 하나로 센다
        if not _is_descendant_of_any(node, media):
            media.append(node)
    if not media:
        return None

    ordinal = sum(1 for text in index.lines[:line] if is_media_line(text))
    if ordinal < len(media):
        return media[ordinal]
    return media[0]


def resolve_image(tree: Tag, index: TextPositionIndex, raw_line: str, line: int,
                  threshold: float) -> Optional[Tag]:
    label = normalize(image_label(raw_line))
    if not label:
        return None

    best: Optional[Tag] = None
    best_score = 0.0
    for img in tree.find_all('img'):
        alt = normalize(img.get('alt') or img.get('title') or '')
        s = score(label, alt)
        if s > best_score and is_accepted(s, threshold):
            best_score = s
            best = img
    return best


SPECIAL_RULES: Dict[str, Callable[..., Optional[Tag]]] = {
    'details': resolve_details,
    'table': resolve_table,
    'media': resolve_media,
    'image': resolve_image,
}


def resolve_special_construct(
    construct: str,
    tree: Tag,
    index: TextPositionIndex,
    raw_line: str,
    line: int,
    threshold: float,
) -> Optional[Tag]:
    """construct 종류에 해당하는 규칙을 적용한다. 규칙이 없거나 실패하면 None."""
    rule = SPECIAL_RULES.get(construct)
    if rule is None:
        return None
    node = rule(tree, index, raw_line, line, threshold)
    if node is not None:
        logger.debug(f"특수 구문 매칭: {construct} line {line} → <{node.name}>")
    return node
