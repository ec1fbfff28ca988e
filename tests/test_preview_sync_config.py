"""config 유닛 테스트."""
import pytest
from preview_sync.config import ConfigError, SyncConfig, load_config

ENV_NAMES = (
    'PREVIEW_SYNC_SCROLL_DEBOUNCE_MS',
    'PREVIEW_SYNC_HIGHLIGHT_DEBOUNCE_MS',
    'PREVIEW_SYNC_CONTENT_THRESHOLD',
    'PREVIEW_SYNC_CLICK_THRESHOLD',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


class TestSyncConfig:
    def test_defaults(self):
        config = SyncConfig()
        assert config.scroll_debounce_ms == 50
        assert config.highlight_debounce_ms == 100
        assert config.content_match_threshold == 0.5
        assert config.click_match_threshold == 0.3
        assert config.scroll_debounce_seconds == pytest.approx(0.05)
        assert config.highlight_debounce_seconds == pytest.approx(0.1)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv('PREVIEW_SYNC_SCROLL_DEBOUNCE_MS', '20')
        monkeypatch.setenv('PREVIEW_SYNC_CLICK_THRESHOLD', '0.45')
        config = SyncConfig()
        assert config.scroll_debounce_ms == 20
        assert config.click_match_threshold == pytest.approx(0.45)

    def test_arguments_take_precedence_over_env(self, monkeypatch):
        monkeypatch.setenv('PREVIEW_SYNC_HIGHLIGHT_DEBOUNCE_MS', '5')
        monkeypatch.setenv('PREVIEW_SYNC_CONTENT_THRESHOLD', '0.2')
        config = SyncConfig(highlight_debounce_ms=300, content_match_threshold=0.9)
        assert config.highlight_debounce_ms == 300
        assert config.content_match_threshold == pytest.approx(0.9)
        # 지정하지 않은 필드만 환경 변수를 따른다
        monkeypatch.setenv('PREVIEW_SYNC_CLICK_THRESHOLD', '0.4')
        assert SyncConfig(highlight_debounce_ms=300).click_match_threshold == pytest.approx(0.4)

    def test_empty_env_is_ignored(self, monkeypatch):
        monkeypatch.setenv('PREVIEW_SYNC_SCROLL_DEBOUNCE_MS', '')
        assert SyncConfig().scroll_debounce_ms == 50

    @pytest.mark.parametrize("kwargs", [
        {'scroll_debounce_ms': -1},
        {'highlight_debounce_ms': 'soon'},
        {'content_match_threshold': 1.0},
        {'click_match_threshold': -0.1},
        {'click_match_threshold': True},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            SyncConfig(**kwargs)

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv('PREVIEW_SYNC_CONTENT_THRESHOLD', 'high')
        with pytest.raises(ConfigError):
            SyncConfig()


class TestLoadConfig:
    def test_none_returns_defaults(self):
        assert load_config(None) == SyncConfig()

    def test_top_level_keys(self, tmp_path):
        path = tmp_path / 'sync.yaml'
        path.write_text('scroll_debounce_ms: 10\ncontent_match_threshold: 0.6\n')
        config = load_config(path)
        assert config.scroll_debounce_ms == 10
        assert config.content_match_threshold == pytest.approx(0.6)
        assert config.highlight_debounce_ms == 100

    def test_section(self, tmp_path):
        path = tmp_path / 'sync.yaml'
        path.write_text('preview_sync:\n  highlight_debounce_ms: 250\n')
        assert load_config(str(path)).highlight_debounce_ms == 250

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'sync.yaml'
        path.write_text('')
        assert load_config(path) == SyncConfig()

    def test_file_overrides_env(self, tmp_path, monkeypatch):
        path = tmp_path / 'sync.yaml'
        path.write_text('scroll_debounce_ms: 10\n')
        monkeypatch.setenv('PREVIEW_SYNC_SCROLL_DEBOUNCE_MS', '70')
        monkeypatch.setenv('PREVIEW_SYNC_HIGHLIGHT_DEBOUNCE_MS', '80')
        config = load_config(path)
        assert config.scroll_debounce_ms == 10
        assert config.highlight_debounce_ms == 80

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / 'sync.yaml'
        path.write_text('scroll_debounce_ms: 10\nsmooth_scroll: true\n')
        with pytest.raises(ConfigError, match='smooth_scroll'):
            load_config(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / 'sync.yaml'
        path.write_text('- 1\n- 2\n')
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match='Config file not found'):
            load_config(tmp_path / 'missing.yaml')
