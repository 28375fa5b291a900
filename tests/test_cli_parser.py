"""Tests for CLI command parsing."""

import pytest

from cli.models import ExportCommand, ListCommand, UploadCommand, UserCommand
from cli.parser import ParseError, parse_command


def test_parse_user():
    assert parse_command('user alice') == UserCommand(name='alice')


def test_parse_user_requires_one_name():
    with pytest.raises(ParseError):
        parse_command('user')
    with pytest.raises(ParseError):
        parse_command('user alice bob')


def test_parse_upload_multiple_paths():
    cmd = parse_command('upload holiday/ "my notes.pdf"')
    assert cmd == UploadCommand(paths=('holiday/', 'my notes.pdf'))


def test_parse_upload_requires_path():
    with pytest.raises(ParseError):
        parse_command('upload')


def test_parse_list_without_filters():
    assert parse_command('list') == ListCommand()


def test_parse_list_with_query_and_type():
    cmd = parse_command('list beach --type image/')
    assert cmd == ListCommand(query='beach', type_prefix='image/')


def test_parse_list_type_requires_value():
    with pytest.raises(ParseError):
        parse_command('list --type')


def test_parse_export_default_and_explicit_path():
    assert parse_command('export') == ExportCommand()
    assert parse_command('export backups/alice.zip') == ExportCommand(output_path='backups/alice.zip')


def test_parse_errors():
    with pytest.raises(ParseError, match='Empty command'):
        parse_command('   ')
    with pytest.raises(ParseError, match='Unknown command'):
        parse_command('delete everything')
    with pytest.raises(ParseError, match='Invalid syntax'):
        parse_command('upload "unterminated')
