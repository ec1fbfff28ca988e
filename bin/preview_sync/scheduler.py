"""Scheduler — 취소 가능한 지연 호출과 디바운스.

스케줄러는 `call_later(delay_seconds, callback) -> handle` 과 `handle.cancel()` 만
요구한다. asyncio 이벤트 루프가 이 계약을 그대로 만족한다.
"""
import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


def default_scheduler() -> Optional[Scheduler]:
    """실행 중인 asyncio 루프를 반환한다. 실행 중인 루프가 없으면 None.

    프로세스 전역의 현재 이벤트 루프는 건드리지 않는다. 루프 밖에서 쓰는 호스트는
    스케줄러를 명시적으로 넘겨야 한다.
    """
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Debouncer:
    """trailing-edge 디바운스. 재예약 = 대기 중이면 취소 후 새로 예약."""

    def __init__(self, scheduler: Scheduler, delay_seconds: float, name: str = ''):
        self.scheduler = scheduler
        self.delay_seconds = delay_seconds
        self.name = name
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[..., Any], *args: Any):
        self.cancel()
        self._handle = self.scheduler.call_later(self.delay_seconds, self._fire, callback, args)

    def _fire(self, callback: Callable[..., Any], args: tuple):
        self._handle = None
        callback(*args)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug(f"debounce 취소: {self.name}")
