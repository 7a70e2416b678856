"""
Unit Tests for the logging helpers
"""
import json
import logging

from app.core.logging_config import (
    JSONFormatter,
    generate_request_id,
    logger,
    set_request_id,
    set_user_id,
)


def make_record(message, **extra):
    record = logging.LogRecord('panel', logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_includes_context_and_extra(self):
        set_request_id('abc12345')
        set_user_id('user-1')
        try:
            line = JSONFormatter().format(make_record('Domain created', event_type='mutation'))
        finally:
            set_request_id('')
            set_user_id('')

        entry = json.loads(line)
        assert entry['message'] == 'Domain created'
        assert entry['request_id'] == 'abc12345'
        assert entry['user_id'] == 'user-1'
        assert entry['event_type'] == 'mutation'
        assert 'args' not in entry

    def test_no_context_when_unset(self):
        entry = json.loads(JSONFormatter().format(make_record('plain')))

        assert 'request_id' not in entry
        assert 'user_id' not in entry


class TestPanelLogger:

    def test_request_id_shape(self):
        assert len(generate_request_id()) == 8

    def test_validation_failure_logs_field_names_only(self, caplog):
        with caplog.at_level(logging.INFO, logger='panel'):
            logger.log_validation_failure('Domains', {'privilege': ['x'], 'name': ['y']})

        record = caplog.records[-1]
        assert record.getMessage() == '[Domains] Validation failed: name, privilege'
        assert record.fields == ['name', 'privilege']
