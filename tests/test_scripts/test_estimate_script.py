"""Tests for the graduation estimate CLI formatter."""

from __future__ import annotations

from scripts.estimate_graduation import format_estimate
from src.bundly.graduation import estimate


class TestFormatEstimate:
    def test_success_breakdown(self):
        text = format_estimate(estimate(30_014_500_000))
        assert "spendable:            30000000000 lamports" in text
        assert "tokens expected:      536500000000000" in text
        assert "min tokens out:       482850000000000" in text
        assert "capped" not in text

    def test_capped_note(self):
        text = format_estimate(estimate(100_000_000_000))
        assert "uncapped expected:    825356993664678" in text
        assert "min tokens out:       713790000000000" in text

    def test_error_line(self):
        text = format_estimate(estimate(14_500_000))
        assert "error:                insufficient_escrow" in text
        assert "tokens expected" not in text
