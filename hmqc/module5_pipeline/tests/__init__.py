"""
Module 5 Pipeline - Test Suite

End-to-end tests for the encode/decode orchestrator.

Test Coverage:
- test_roundtrip.py: Payload -> Matrix -> payload for every content type
- test_corruption.py: Symbol errors inside the matrix, corrected or reported

Run all tests:
    pytest hmqc/module5_pipeline/tests/ -v
"""

__all__ = []
