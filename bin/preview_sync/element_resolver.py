"""Element Resolver — 소스 라인 ↔ 프리뷰 노드 대응을 찾는다.

방향:
  resolve_preview_from_line  에디터 라인 → 프리뷰 노드
  resolve_line_from_click    클릭된 프리뷰 노드 → 에디터 라인

렌더러가 붙인 data-ln 라인 주석이 있으면 그대로 사용하고(빠른 경로),
없으면 특수 구문 규칙과 텍스트 기반 매칭으로 대체한다.
버퍼와 트리는 호출 동안 변하지 않는 스냅샷으로 취급하며, 구조를 변경하지 않는다.
"""
import logging
from typing import Dict, List, Optional

from bs4 import NavigableString, Tag

from preview_sync.config import SyncConfig
from preview_sync.element_classifier import classify, classify_construct
from preview_sync.match_scorer import contains_ratio, is_accepted, score, word_overlap
from preview_sync.special_constructs import resolve_special_construct
from preview_sync.syntax_normalizer import normalize, normalize_markup
from preview_sync.text_position import TextPositionIndex

logger = logging.getLogger(__name__)

# 렌더러가 소스 라인 번호를 기록하는 속성
LINE_ATTR = 'data-ln'

# 이보다 짧은 정규화 텍스트는 매칭하지 않는다
MIN_MATCH_LENGTH = 2


def parse_line_annotation(value) -> Optional[int]:
    """data-ln 속성값을 정수로 변환한다. 정수가 아니거나 음수면 None."""
    if value is None:
        return None
    if isinstance(value, list):
        value = value[0] if value else None
    try:
        line = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return line if line >= 0 else None


def _is_ancestor(candidate: Tag, node: Tag) -> bool:
    return any(p is candidate for p in node.parents)


class ElementResolver:
    """하나의 버퍼/트리 스냅샷에 대한 해석기."""

    def __init__(self, buffer: Optional[str], tree: Optional[Tag],
                 config: Optional[SyncConfig] = None):
        self.index = TextPositionIndex(buffer or '')
        self.tree = tree
        self.config = config or SyncConfig()
        self._annotated: Optional[Dict[int, Tag]] = None
        self._normalized_lines: Optional[List[str]] = None

    # -----------------------------------------------------------------
    # Line annotation (data-ln)
    # -----------------------------------------------------------------

    def line_annotation_of(self, node) -> Optional[int]:
        """node 자신부터 루트까지 올라가며 첫 번째 라인 주석을 반환한다."""
        el = node.parent if isinstance(node, NavigableString) else node
        while isinstance(el, Tag):
            line = parse_line_annotation(el.get(LINE_ATTR))
            if line is not None:
                return line
            el = el.parent
        return None

    def _annotation_index(self) -> Dict[int, Tag]:
        """라인 → 해당 라인 주석을 가진 마지막 노드(문서 순서) 인덱스."""
        if self._annotated is None:
            index: Dict[int, Tag] = {}
            if self.tree is not None:
                nodes = self.tree.find_all(attrs={LINE_ATTR: True})
                if self.tree.get(LINE_ATTR) is not None:
                    nodes = [self.tree] + list(nodes)
                for node in nodes:
                    line = parse_line_annotation(node.get(LINE_ATTR))
                    if line is not None:
                        # 같은 라인이 중첩 노드에 여러 번 붙으면 가장 안쪽(마지막)이 우선
                        index[line] = node
            self._annotated = index
        return self._annotated

    def find_annotated_node(self, line: int) -> Optional[Tag]:
        """line 부터 0 까지 내려가며 라인 주석이 있는 노드를 찾는다.

        여러 줄 구문 내부처럼 직접 렌더링되지 않은 라인은
        가장 가까운 앞쪽 주석 라인의 노드를 이어받는다.
        """
        annotated = self._annotation_index()
        if not annotated or line is None:
            return None
        current = min(line, max(annotated))
        while current >= 0:
            node = annotated.get(current)
            if node is not None:
                return node
            current -= 1
        return None

    # -----------------------------------------------------------------
    # Editor → Preview
    # -----------------------------------------------------------------

    def resolve_preview_from_line(self, line: int) -> Optional[Tag]:
        if self.tree is None or line is None or line < 0:
            return None

        node = self.find_annotated_node(line)
        if node is not None:
            logger.debug(f"data-ln 매칭: line {line} → <{node.name}>")
            return node

        raw = self.index.text_of_line(line)
        if not raw.strip():
            return None

        construct = classify_construct(raw)
        if construct is not None:
            node = resolve_special_construct(
                construct, self.tree, self.index, raw, line,
                self.config.content_match_threshold)
            if node is not None:
                return node

        return self.find_element_by_content(raw, line)

    def find_element_by_content(self, raw_line: str, line: int) -> Optional[Tag]:
        """분류된 후보 요소 중 라인 텍스트와 가장 유사한 요소를 찾는다."""
        target = normalize_markup(raw_line)
        if len(target) < MIN_MATCH_LENGTH or self.tree is None:
            return None

        kinds = classify(raw_line)
        best: Optional[Tag] = None
        best_score = 0.0
        for candidate in self.tree.select(', '.join(kinds)):
            # 다른 라인에 이미 귀속된 노드는 건너뜀
            claimed = parse_line_annotation(candidate.get(LINE_ATTR))
            if claimed is not None and claimed != line:
                continue
            text = normalize(candidate.get_text())
            if not text:
                continue
            s = score(target, text)
            if not is_accepted(s, self.config.content_match_threshold):
                continue
            if s > best_score or (s == best_score and best is not None
                                  and _is_ancestor(best, candidate)):
                # 동점이면 더 안쪽(구체적인) 요소를 선호
                best_score = s
                best = candidate

        if best is not None:
            logger.debug(f"콘텐츠 매칭: line {line} → <{best.name}> (score={best_score:.2f})")
        return best

    # -----------------------------------------------------------------
    # Preview → Editor
    # -----------------------------------------------------------------

    def resolve_line_from_click(self, node) -> Optional[int]:
        if node is None:
            return None
        line = self.line_annotation_of(node)
        if line is not None:
            return line
        return self.find_line_by_content(node)

    def _lines_normalized(self) -> List[str]:
        if self._normalized_lines is None:
            self._normalized_lines = [normalize_markup(text) for text in self.index.lines]
        return self._normalized_lines

    def find_line_by_content(self, node) -> Optional[int]:
        """노드 텍스트와 일치하는 버퍼 라인을 찾는다.

        매칭 전략 (앞 단계에서 하나라도 찾으면 다음 단계로 넘어가지 않음):
          1. 완전 일치
          2. 포함 관계 (양방향)
          3. 단어 겹침 (click_match_threshold 초과)
        단계 내에서는 점수가 가장 높은 라인, 동점이면 앞 라인을 반환한다.
        """
        text = node.get_text() if isinstance(node, Tag) else str(node)
        target = normalize(text)
        if len(target) < MIN_MATCH_LENGTH:
            return None

        lines = self._lines_normalized()

        for i, line_text in enumerate(lines):
            if line_text and line_text == target:
                logger.debug(f"라인 완전 일치: line {i}")
                return i

        found = self._best_line(lines, target, contains_ratio, 0.0)
        if found is not None:
            logger.debug(f"라인 포함 매칭: line {found}")
            return found

        found = self._best_line(lines, target, word_overlap, self.config.click_match_threshold)
        if found is not None:
            logger.debug(f"라인 단어 겹침 매칭: line {found}")
        return found

    @staticmethod
    def _best_line(lines: List[str], target: str, scorer, threshold: float) -> Optional[int]:
        best: Optional[int] = None
        best_score = 0.0
        for i, line_text in enumerate(lines):
            # 한 글자 라인은 거의 모든 텍스트에 포함되므로 제외
            if len(line_text) < MIN_MATCH_LENGTH:
                continue
            s = scorer(line_text, target)
            if s > best_score and is_accepted(s, threshold):
                best_score = s
                best = i
        return best
