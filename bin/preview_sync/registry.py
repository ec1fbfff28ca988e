"""Sync Registry — 문서(편집 세션)마다 하나의 SyncController 를 관리한다.

호스트가 문서를 열고 닫을 때 open()/close() 를 명시적으로 호출한다.
컨트롤러끼리 상태를 공유하지 않는다.
"""
import logging
from typing import Dict, Hashable, Optional

from preview_sync.config import SyncConfig
from preview_sync.scheduler import Scheduler
from preview_sync.sync_controller import EditorSurface, PreviewSurface, SyncController

logger = logging.getLogger(__name__)


class SyncRegistry:
    def __init__(self, config: Optional[SyncConfig] = None,
                 scheduler: Optional[Scheduler] = None):
        self.config = config or SyncConfig()
        self.scheduler = scheduler
        self._controllers: Dict[Hashable, SyncController] = {}

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._controllers

    def get(self, key: Hashable) -> Optional[SyncController]:
        return self._controllers.get(key)

    def open(self, key: Hashable, editor: EditorSurface,
             preview: PreviewSurface) -> Optional[SyncController]:
        """key 에 대한 컨트롤러를 만들고 attach 한다. 이미 있으면 기존 것을 반환한다."""
        existing = self._controllers.get(key)
        if existing is not None:
            return existing
        if editor is None or preview is None:
            logger.debug(f"editor/preview 가 준비되지 않음: {key!r}")
            return None

        controller = SyncController(self.config, self.scheduler)
        controller.attach(editor, preview)
        if not controller.is_attached:
            return None
        self._controllers[key] = controller
        logger.info(f"문서 동기화 시작: {key!r}")
        return controller

    def close(self, key: Hashable) -> bool:
        controller = self._controllers.pop(key, None)
        if controller is None:
            return False
        controller.destroy()
        logger.info(f"문서 동기화 종료: {key!r}")
        return True

    def close_all(self):
        for key in list(self._controllers):
            self.close(key)
