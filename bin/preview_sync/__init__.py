"""Preview Sync 패키지 — 소스 마크업 ↔ 렌더링 프리뷰 위치 동기화 모듈.

에디터 커서 위치에서 프리뷰 노드를, 프리뷰 클릭 노드에서 소스 라인을
찾는 해석 엔진(reverse lookup)은 preview_sync.element_resolver 에 있다.
디바운스·하이라이트 수명 주기는 preview_sync.sync_controller 가 담당한다.
"""
from preview_sync.config import SyncConfig, load_config
from preview_sync.element_resolver import ElementResolver
from preview_sync.registry import SyncRegistry
from preview_sync.sync_controller import SyncController

__all__ = [
    'ElementResolver',
    'SyncConfig',
    'SyncController',
    'SyncRegistry',
    'load_config',
]
