"""Tests for backend failure reporting."""

import logging

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from kinchart.services.errors import report_failure
from kinchart.services.storage import StorageError


def test_database_error_becomes_static_message(caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(HTTPException) as exc_info:
            with report_failure("Failed to load visits"):
                raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to load visits"
    assert "connection lost" in caplog.text


def test_storage_error_uses_given_status():
    with pytest.raises(HTTPException) as exc_info:
        with report_failure("Failed to upload document", status_code=502):
            raise StorageError("disk full")

    assert exc_info.value.status_code == 502


def test_other_errors_propagate():
    with pytest.raises(ValueError):
        with report_failure("Failed to load visits"):
            raise ValueError("bug")
