"""Sync Controller — 에디터/프리뷰 이벤트를 받아 해석기를 호출하고 결과를 적용한다.

소유 상태:
  active_target        현재 하이라이트된 프리뷰 노드 (최대 1개)
  scroll / highlight   서로 독립적으로 디바운스되는 타이머 2개
  listeners            attach 시 등록, destroy 시 해제

destroy 이후의 모든 콜백은 _destroyed 플래그로 무시된다.
"""
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from bs4 import NavigableString, Tag

from preview_sync.config import SyncConfig
from preview_sync.element_resolver import ElementResolver
from preview_sync.scheduler import Debouncer, Scheduler, default_scheduler
from preview_sync.selector import unique_css_selector
from preview_sync.text_position import TextPositionIndex

logger = logging.getLogger(__name__)

NAVIGATION_KEYS = frozenset({
    'ArrowUp', 'ArrowDown', 'ArrowLeft', 'ArrowRight', 'Home', 'End', 'PageUp', 'PageDown',
})


class EditorSurface(Protocol):
    """호스트 편집 위젯. add_listener/remove_listener 는 선택 사항이다."""

    text: str
    selection_start: int

    def set_selection(self, start: int, end: int) -> None:
        ...

    def focus_caret(self, offset: int) -> None:
        ...


class PreviewSurface(Protocol):
    """렌더링된 프리뷰. clear_highlight, add_listener/remove_listener 는 선택 사항이다."""

    tree: Optional[Tag]
    client_height: int

    def offset_top(self, node: Tag) -> Optional[int]:
        ...

    def scroll_to(self, top: int) -> None:
        ...

    def apply_highlight(self, selector: str, node: Tag) -> None:
        ...


class SyncController:
    def __init__(self, config: Optional[SyncConfig] = None,
                 scheduler: Optional[Scheduler] = None):
        self.config = config or SyncConfig()
        self.editor: Optional[EditorSurface] = None
        self.preview: Optional[PreviewSurface] = None
        self.active_target: Optional[Tag] = None
        self.is_attached = False
        self._scheduler = scheduler
        self._scroll_debouncer: Optional[Debouncer] = None
        self._highlight_debouncer: Optional[Debouncer] = None
        self._listeners: List[Tuple[Any, str, Callable]] = []
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    def attach(self, editor: EditorSurface, preview: PreviewSurface):
        if self.is_attached or self._destroyed:
            return
        if editor is None or preview is None:
            logger.debug("editor 또는 preview 가 없어 attach 를 건너뜀")
            return

        scheduler = self._scheduler or default_scheduler()
        if scheduler is None:
            logger.warning("실행 중인 asyncio 루프가 없고 scheduler 도 지정되지 않아 attach 를 건너뜀")
            return

        self.editor = editor
        self.preview = preview
        self._scroll_debouncer = Debouncer(
            scheduler, self.config.scroll_debounce_seconds, name='scroll')
        self._highlight_debouncer = Debouncer(
            scheduler, self.config.highlight_debounce_seconds, name='highlight')

        # Preview → Editor
        self._listen(preview, 'mousedown', self._handle_preview_mousedown)
        # Editor → Preview
        self._listen(editor, 'mouseup', self._handle_editor_change)
        self._listen(editor, 'input', self._handle_editor_change)
        self._listen(editor, 'click', self._handle_editor_change)
        self._listen(editor, 'keydown', self._handle_editor_key_down)
        self._listen(editor, 'keyup', self._handle_editor_key_up)

        self.is_attached = True
        logger.info(f"SyncController attach 완료 (listeners={len(self._listeners)})")

    def _listen(self, surface, event: str, callback: Callable):
        add_listener = getattr(surface, 'add_listener', None)
        if add_listener is None:
            return
        add_listener(event, callback)
        self._listeners.append((surface, event, callback))

    def destroy(self):
        if self._destroyed:
            return
        self._destroyed = True

        for debouncer in (self._scroll_debouncer, self._highlight_debouncer):
            if debouncer is not None:
                debouncer.cancel()

        for surface, event, callback in self._listeners:
            remove_listener = getattr(surface, 'remove_listener', None)
            if remove_listener is not None:
                remove_listener(event, callback)
        self._listeners = []

        clear_highlight = getattr(self.preview, 'clear_highlight', None)
        if self.active_target is not None and clear_highlight is not None:
            clear_highlight()

        self.editor = None
        self.preview = None
        self.active_target = None
        self._scroll_debouncer = None
        self._highlight_debouncer = None
        self.is_attached = False
        logger.info("SyncController destroy 완료")

    # -----------------------------------------------------------------
    # Event handlers
    # -----------------------------------------------------------------

    def _handle_editor_change(self, event=None):
        self.request_sync()

    def _handle_editor_key_down(self, event=None):
        if getattr(event, 'key', None) in NAVIGATION_KEYS:
            self.request_sync()

    def _handle_editor_key_up(self, event=None):
        if getattr(event, 'key', None) in NAVIGATION_KEYS:
            self.on_editor_position_changed()

    def _handle_preview_mousedown(self, event):
        self.on_preview_node_activated(getattr(event, 'target', None), event)

    def request_sync(self):
        """에디터 → 프리뷰 동기화를 scroll 디바운스로 예약한다."""
        if self._destroyed or self._scroll_debouncer is None:
            return
        self._scroll_debouncer.schedule(self.on_editor_position_changed)

    # -----------------------------------------------------------------
    # Editor → Preview
    # -----------------------------------------------------------------

    def on_editor_position_changed(self) -> Optional[Tag]:
        """현재 커서 라인에 대응하는 프리뷰 노드로 스크롤하고 하이라이트를 예약한다."""
        if self._destroyed or self.editor is None or self.preview is None:
            return None
        tree = self.preview.tree
        if tree is None:
            logger.debug("preview tree 가 없어 동기화를 건너뜀")
            return None

        resolver = ElementResolver(self.editor.text, tree, self.config)
        line = resolver.index.line_number_at(self.editor.selection_start)
        node = resolver.resolve_preview_from_line(line)
        if node is None:
            return None

        if self._highlight_debouncer is not None:
            self._highlight_debouncer.schedule(self.set_active_target, node)
        self.scroll_preview_to(node)
        return node

    def scroll_preview_to(self, node: Tag):
        """node 가 스크롤 컨테이너의 세로 중앙에 오도록 스크롤한다."""
        if self.preview is None or node is None:
            return
        offset = self.preview.offset_top(node)
        if offset is None:
            return
        target = offset - int(self.preview.client_height / 2)
        self.preview.scroll_to(max(0, target))

    # -----------------------------------------------------------------
    # Preview → Editor
    # -----------------------------------------------------------------

    def on_preview_node_activated(self, node, event=None) -> Optional[int]:
        """클릭된 프리뷰 노드에 대응하는 라인을 선택하고 하이라이트한다."""
        if self._destroyed:
            return None
        if event is not None:
            for action in ('prevent_default', 'stop_propagation'):
                method = getattr(event, action, None)
                if method is not None:
                    method()
        if node is None or self.editor is None or self.preview is None:
            return None

        resolver = ElementResolver(self.editor.text, self.preview.tree, self.config)
        annotated = resolver.line_annotation_of(node) is not None
        line = resolver.resolve_line_from_click(node)
        if line is None:
            return None

        self.select_line(resolver.index, line)

        if annotated:
            target = resolver.find_annotated_node(line)
        else:
            target = node.parent if isinstance(node, NavigableString) else node
        if target is not None:
            # 이전 에디터 이동에서 예약된 하이라이트가 클릭 결과를 덮지 않도록 취소
            if self._highlight_debouncer is not None:
                self._highlight_debouncer.cancel()
            self.set_active_target(target)
        return line

    def select_line(self, index: TextPositionIndex, line: int):
        start, end = index.line_bounds(line)
        self.editor.focus_caret(start)
        self.editor.set_selection(start, end)

    # -----------------------------------------------------------------
    # Highlight
    # -----------------------------------------------------------------

    def set_active_target(self, node: Optional[Tag]) -> bool:
        """ActiveTarget 을 교체한다. 같은 노드(is)면 아무 일도 하지 않는다.

        Returns:
            하이라이트를 새로 적용했으면 True
        """
        if self._destroyed or node is None or self.preview is None:
            return False
        if node is self.active_target:
            return False
        self.active_target = node
        self.preview.apply_highlight(unique_css_selector(node), node)
        return True
