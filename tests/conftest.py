"""동기화 테스트용 가짜 에디터/프리뷰/스케줄러."""
from collections import defaultdict

import pytest
from bs4 import BeautifulSoup


class FakeTimer:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """advance() 로 시간을 진행시키는 수동 스케줄러."""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback, *args):
        timer = FakeTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.timers.remove(timer)
            self.now = timer.when
            timer.callback(*timer.args)
        self.now = target


class _Listenable:
    def __init__(self):
        self.listeners = defaultdict(list)

    def add_listener(self, event, callback):
        self.listeners[event].append(callback)

    def remove_listener(self, event, callback):
        self.listeners[event].remove(callback)

    def emit(self, event, payload=None):
        for callback in list(self.listeners[event]):
            callback(payload)


class FakeEditor(_Listenable):
    def __init__(self, text='', selection_start=0):
        super().__init__()
        self.text = text
        self.selection_start = selection_start
        self.selection = None
        self.caret = None

    def set_selection(self, start, end):
        self.selection = (start, end)

    def focus_caret(self, offset):
        self.caret = offset


class FakePreview(_Listenable):
    def __init__(self, tree, client_height=400, offset=1000):
        super().__init__()
        self.tree = tree
        self.client_height = client_height
        self.offset = offset
        self.scrolls = []
        self.highlights = []
        self.cleared = 0

    def offset_top(self, node):
        return self.offset

    def scroll_to(self, top):
        self.scrolls.append(top)

    def apply_highlight(self, selector, node):
        self.highlights.append((selector, node))

    def clear_highlight(self):
        self.cleared += 1


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def make_surfaces():
    def _make(text='', html='', selection_start=0):
        tree = BeautifulSoup(html, 'html.parser') if html is not None else None
        return FakeEditor(text, selection_start), FakePreview(tree)
    return _make
