import json

import pytest

from decolower import DecoLower
from decolower.core.config import Configuration, EmitOptions, config
from decolower.core.error_handling import ConfigurationError, InvalidConfigurationError
from decolower.models.enums import EmitForm


def test_configuration_is_a_singleton():
    assert Configuration() is config


def test_defaults():
    options = config.emit_options()
    assert options.form == EmitForm.CLASS_BASED
    assert options.indent_size == 2
    assert options.temp_prefix == '_'
    assert config.get('parsing', 'default_language') == 'javascript'
    assert config.get('missing', 'key', 'fallback') == 'fallback'


def test_form_override():
    assert config.emit_options('constructorFunction').form == EmitForm.CONSTRUCTOR_FUNCTION


def test_invalid_settings_are_reported():
    config.set('emission', 'indent_size', 0)
    with pytest.raises(InvalidConfigurationError):
        config.emit_options()
    config.reset()
    with pytest.raises(InvalidConfigurationError):
        config.emit_options('prototypal')


def test_temp_prefix_must_start_an_identifier():
    with pytest.raises(ValueError):
        EmitOptions(temp_prefix='1x')
    assert EmitOptions(temp_prefix='$$').temp_prefix == '$$'


def test_load_file_merges_sections(tmp_path):
    path = tmp_path / 'decolower.json'
    path.write_text(json.dumps({'emission': {'form': 'constructorFunction', 'indent_size': 4}}))
    config.load_file(str(path))
    options = config.emit_options()
    assert options.form == EmitForm.CONSTRUCTOR_FUNCTION
    assert options.indent == '    '
    assert config.get('emission', 'temp_prefix') == '_'


def test_load_file_errors(tmp_path):
    broken = tmp_path / 'broken.json'
    broken.write_text('{not json')
    with pytest.raises(ConfigurationError):
        config.load_file(str(broken))
    with pytest.raises(ConfigurationError):
        config.load_file(str(tmp_path / 'missing.json'))
    listing = tmp_path / 'list.json'
    listing.write_text('[1, 2]')
    with pytest.raises(InvalidConfigurationError):
        config.load_file(str(listing))


def test_facade_reads_configured_form():
    config.set('emission', 'form', 'constructorFunction')
    hem = DecoLower('javascript')
    assert hem.options.form == EmitForm.CONSTRUCTOR_FUNCTION
    out = hem.desugar('@sealed\nclass Foo {}\n')
    assert out.startswith('let Foo = (function () {')
