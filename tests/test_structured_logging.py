import json

from gh2jira.logging import StructuredLogger, configure_logging, get_logger


def test_structured_logger_json_format(capsys):
    """Structured logger emits one JSON object per line on stderr."""
    logger = StructuredLogger(name='test-json', json_logging=True, level='INFO')
    logger.log_operation('issues_listed', repo='acme/widgets', count=3)

    captured = capsys.readouterr()
    lines = [line for line in captured.err.strip().split('\n') if line]

    assert captured.out == ''
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry['level'] == 'INFO'
    assert entry['message'] == 'Operation: issues_listed'
    assert entry['operation'] == 'issues_listed'
    assert entry['repo'] == 'acme/widgets'
    assert entry['count'] == 3


def test_issue_action_marks_dry_run(capsys):
    logger = StructuredLogger(name='test-action', json_logging=True, level='INFO')
    logger.log_issue_action('clone', 7, 'WID', dry_run=True)

    entry = json.loads(capsys.readouterr().err.strip())
    assert entry['message'] == 'issue clone #7 -> WID [DRY]'
    assert entry['issue_number'] == 7
    assert entry['jira_project'] == 'WID'
    assert entry['dry_run'] is True


def test_error_messages_are_redacted(capsys):
    logger = StructuredLogger(name='test-redact', json_logging=True, level='INFO')
    logger.log_error('clone failed', error='token ghp_ABCDEFGHIJKLMNOPQRSTUVWX rejected')

    entry = json.loads(capsys.readouterr().err.strip())
    assert 'ghp_' not in entry['error']


def test_level_filters_debug(capsys):
    logger = StructuredLogger(name='test-level', json_logging=False, level='INFO')
    logger.debug('hidden')
    logger.info('shown')

    err = capsys.readouterr().err
    assert 'hidden' not in err
    assert 'shown' in err


def test_configure_logging_replaces_global():
    first = configure_logging(json_logging=False, level='DEBUG')
    assert get_logger() is first
    second = configure_logging(json_logging=True, level='INFO')
    assert get_logger() is second
