"""registry 유닛 테스트."""
from types import SimpleNamespace

from preview_sync.registry import SyncRegistry


class TestSyncRegistry:
    def test_open_attaches_controller(self, scheduler, make_surfaces):
        registry = SyncRegistry(scheduler=scheduler)
        controller = registry.open('doc-1', *make_surfaces('Hello world', '<p>Hello world</p>'))
        assert controller.is_attached
        assert 'doc-1' in registry
        assert len(registry) == 1
        assert registry.get('doc-1') is controller

    def test_open_is_idempotent(self, scheduler, make_surfaces):
        registry = SyncRegistry(scheduler=scheduler)
        editor, preview = make_surfaces('Hello world', '<p>Hello world</p>')
        first = registry.open('doc-1', editor, preview)
        second = registry.open('doc-1', *make_surfaces())
        assert first is second
        assert len(editor.listeners['input']) == 1

    def test_open_without_surfaces(self, scheduler):
        registry = SyncRegistry(scheduler=scheduler)
        assert registry.open('doc-1', None, None) is None
        assert 'doc-1' not in registry

    def test_close_destroys_controller(self, scheduler, make_surfaces):
        registry = SyncRegistry(scheduler=scheduler)
        editor, preview = make_surfaces('Hello world', '<p>Hello world</p>')
        controller = registry.open('doc-1', editor, preview)
        assert registry.close('doc-1') is True
        assert controller.destroyed
        assert not editor.listeners['input']
        assert registry.close('doc-1') is False

    def test_controllers_are_independent(self, scheduler, make_surfaces):
        registry = SyncRegistry(scheduler=scheduler)
        editor_a, preview_a = make_surfaces('alpha text', '<p>alpha text</p>')
        editor_b, preview_b = make_surfaces('beta text', '<p>beta text</p>')
        a = registry.open('a', editor_a, preview_a)
        b = registry.open('b', editor_b, preview_b)

        editor_a.emit('input', SimpleNamespace())
        scheduler.advance(1.0)

        assert a.active_target is preview_a.tree.p
        assert b.active_target is None
        assert preview_b.highlights == []

    def test_close_all(self, scheduler, make_surfaces):
        registry = SyncRegistry(scheduler=scheduler)
        controllers = [registry.open(key, *make_surfaces()) for key in ('a', 'b')]
        registry.close_all()
        assert len(registry) == 0
        assert all(c.destroyed for c in controllers)

    def test_open_outside_loop_without_scheduler(self, make_surfaces):
        registry = SyncRegistry()
        assert registry.open('doc-1', *make_surfaces('a', '<p>a</p>')) is None
        assert 'doc-1' not in registry
