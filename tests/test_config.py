import json

import pytest

from subtitle_bridge.core.config import TranslationConfig, TranslationStyle
from subtitle_bridge.core.exceptions import ConfigurationError
from subtitle_bridge.utils.config import ConfigManager
from subtitle_bridge.utils.language import detect_language, language_slug


def test_defaults_when_file_is_missing(tmp_path):
    manager = ConfigManager(tmp_path / "config.json")

    assert manager.get('translator.type') == 'mistral'
    assert manager.get('translation.batch_size') == 10
    assert manager.get('translation.nope', 'fallback') == 'fallback'
    assert manager.get('languages.target.deeper') is None


def test_file_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'translation': {'batch_size': 25}}), encoding='utf-8')

    manager = ConfigManager(path)

    assert manager.get('translation.batch_size') == 25
    assert manager.get('translation.concurrency') == 5


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding='utf-8')

    assert ConfigManager(path).get('languages.source') == 'English'


def test_set_and_update_persist(tmp_path):
    path = tmp_path / "nested" / "config.json"
    manager = ConfigManager(path)

    assert manager.set('translator.model', 'open-mistral-nemo')
    assert manager.update({'languages.target': 'Korean', 'translation.concurrency': 2})

    reloaded = ConfigManager(path)
    assert reloaded.get('translator.model') == 'open-mistral-nemo'
    assert reloaded.get('languages.target') == 'Korean'
    assert reloaded.get('translation.concurrency') == 2
    assert not path.with_suffix('.tmp').exists()


def test_defaults_are_not_shared_between_managers(tmp_path):
    first = ConfigManager(tmp_path / "a.json")
    first.set('translation.batch_size', 99, save=False)

    assert ConfigManager(tmp_path / "b.json").get('translation.batch_size') == 10


def test_translation_config_ignores_unset_overrides(tmp_path):
    manager = ConfigManager(tmp_path / "config.json")

    config = manager.translation_config(target_language='Italian', batch_size=None, dry_run=True)

    assert config.target_language == 'Italian'
    assert config.batch_size == 10
    assert config.dry_run
    assert config.style is TranslationStyle.NATURAL


def test_style_is_parsed_from_strings():
    assert TranslationConfig(style=' Casual ').style is TranslationStyle.CASUAL
    with pytest.raises(ConfigurationError):
        TranslationConfig(style='shouty')


@pytest.mark.parametrize("changes", [
    {'batch_size': 0},
    {'concurrency': 0},
    {'max_retries': -1},
    {'retry_delay': -0.5},
    {'request_delay': -1.0},
    {'context_sample_size': 0},
])
def test_invalid_values_are_rejected(changes):
    with pytest.raises(ConfigurationError):
        TranslationConfig(**changes)


def test_updated_returns_a_modified_copy():
    config = TranslationConfig()
    changed = config.updated(source_language='Dutch')

    assert changed.source_language == 'Dutch'
    assert config.source_language == 'English'
    with pytest.raises(ConfigurationError):
        config.updated(batch_size=0)


def test_language_detection_and_fallback():
    assert detect_language(["Das ist ein kurzer Satz auf Deutsch, der nur zum Testen dient."]) == 'German'
    assert detect_language(["12345 !!!"]) == 'English'
    assert detect_language([]) == 'English'


def test_language_slug():
    assert language_slug('Traditional Chinese') == 'traditional-chinese'
    assert language_slug('  ') == 'translated'


@pytest.mark.parametrize("stored", ["ten", None, [3]])
def test_non_numeric_stored_values_raise_configuration_error(tmp_path, stored):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'translation': {'batch_size': stored}}), encoding='utf-8')

    with pytest.raises(ConfigurationError) as excinfo:
        ConfigManager(path).translation_config()
    assert 'translation.batch_size' in str(excinfo.value)
