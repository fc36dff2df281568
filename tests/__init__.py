"""
Test Suite for StudyScribe

This package contains all tests for the study companion.
Tests are organized by module and use pytest for test discovery and execution.

Running Tests:
    # Run all tests
    pytest

    # Run specific test file
    pytest tests/test_storage.py

    # Run only unit tests
    pytest -m unit

    # Run only integration tests
    pytest -m integration
"""
