"""
Tests for logging, error envelopes and bearer identity.
"""

import json
import logging
import pytest
from datetime import timedelta

from mentee_api.core.errors import (
    AuthenticationError,
    QuestionNotFoundError,
    UserNotFoundError,
    ValidationError,
    error_body,
    field_errors,
)
from mentee_api.core.logging import (
    StructuredFormatter,
    TextFormatter,
    get_context_logger,
)
from mentee_api.core.security import create_access_token, decode_identity
from mentee_api.models import Identity


def make_record(message: str, **extra_data) -> logging.LogRecord:
    record = logging.LogRecord("mentee", logging.INFO, __file__, 10, message, None, None)
    if extra_data:
        record.extra_data = extra_data
    return record


def test_structured_formatter_merges_context():
    """Test that extra_data lands next to the standard fields"""
    line = StructuredFormatter().format(make_record("Answer graded", question_id="q1"))

    entry = json.loads(line)
    assert entry["message"] == "Answer graded"
    assert entry["level"] == "INFO"
    assert entry["question_id"] == "q1"
    assert "timestamp" in entry


def test_text_formatter_appends_pairs():
    line = TextFormatter().format(make_record("Answer graded", attempt_number=2))

    assert line.endswith("Answer graded [attempt_number=2]")


def test_text_formatter_without_context():
    line = TextFormatter().format(make_record("Started"))

    assert line.endswith("Started")


def test_context_logger_merges_bound_and_call_context(caplog):
    """Test that call-site extra_data is merged over bound context"""
    log = get_context_logger("mentee.test", user_id="u1", question_id="q1")

    with caplog.at_level(logging.INFO, logger="mentee.test"):
        log.info("Answer graded", extra_data={"question_id": "q2", "is_correct": True})

    record = caplog.records[-1]
    assert record.extra_data == {"user_id": "u1", "question_id": "q2", "is_correct": True}


def test_error_body():
    assert error_body("X", "boom") == {"error": {"type": "X", "message": "boom"}}
    assert error_body("X", "boom", {"a": 1})["error"]["details"] == {"a": 1}


def test_field_errors():
    errors = [{"loc": ("body", "subjectId"), "msg": "Input should be 'icp'", "type": "enum"}]

    assert field_errors(errors) == [
        {"field": "body.subjectId", "message": "Input should be 'icp'", "type": "enum"}
    ]


def test_error_status_codes():
    assert QuestionNotFoundError("q1").status_code == 404
    assert QuestionNotFoundError("q1").details == {"question_id": "q1"}
    assert UserNotFoundError("u1").status_code == 404
    assert UserNotFoundError("u1").details == {"user_id": "u1"}
    assert ValidationError("bad").details == {}
    assert ValidationError("bad", field="answer").details == {"field": "answer"}


def test_token_round_trip():
    identity = Identity(uid="u1", email="u1@example.com", name="User One")

    assert decode_identity(create_access_token(identity)) == identity


def test_expired_token():
    token = create_access_token(Identity(uid="u1"), expires_delta=timedelta(minutes=-1))

    with pytest.raises(AuthenticationError):
        decode_identity(token)
