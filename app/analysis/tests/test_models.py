"""
Tests for the Analysis model.

Covers the status state machine, teaser extraction, sharing tokens and
the owner querysets.
"""

import pytest
from django_fsm import TransitionNotAllowed

from analysis.models import TIER_CREDITS, Analysis, AnalysisStatus
from analysis.tests.factories import (
    AnalysisFactory,
    CompletedAnalysisFactory,
    FailedAnalysisFactory,
)


class TestTariff:
    def test_tier_prices(self):
        assert TIER_CREDITS == {"basic": 1, "complete": 3}


class TestStateMachine:
    """Forward-only status transitions."""

    def test_pending_to_processing(self, pending_analysis):
        pending_analysis.start_processing()

        assert pending_analysis.status == AnalysisStatus.PROCESSING
        assert pending_analysis.started_at is not None

    def test_processing_to_completed(self, pending_analysis):
        pending_analysis.start_processing()
        pending_analysis.complete(result={"mbti": "INTJ"}, processing_time=3.2)

        assert pending_analysis.status == AnalysisStatus.COMPLETED
        assert pending_analysis.result == {"mbti": "INTJ"}
        assert pending_analysis.processing_time == 3.2
        assert pending_analysis.completed_at is not None
        assert pending_analysis.is_terminal

    def test_pending_to_failed(self, pending_analysis):
        pending_analysis.fail(error_message="timeout")

        assert pending_analysis.status == AnalysisStatus.FAILED
        assert pending_analysis.error_message == "timeout"
        assert pending_analysis.failed_at is not None

    def test_completed_cannot_fail(self, db):
        analysis = CompletedAnalysisFactory()

        with pytest.raises(TransitionNotAllowed):
            analysis.fail(error_message="late failure")

    def test_failed_cannot_complete(self, db):
        analysis = FailedAnalysisFactory()

        with pytest.raises(TransitionNotAllowed):
            analysis.complete(result={})

    def test_processing_cannot_restart(self, pending_analysis):
        pending_analysis.start_processing()

        with pytest.raises(TransitionNotAllowed):
            pending_analysis.start_processing()

    def test_status_is_protected(self, pending_analysis):
        """Status only changes through transitions."""
        with pytest.raises(AttributeError):
            pending_analysis.status = AnalysisStatus.COMPLETED

    def test_terminal_statuses(self):
        assert set(AnalysisStatus.terminal()) == {
            AnalysisStatus.COMPLETED,
            AnalysisStatus.FAILED,
        }


class TestTeaser:
    def test_teaser_reads_headline_fields(self, completed_analysis):
        assert completed_analysis.teaser == {
            "mbti": "ENFP",
            "passion_score": 87,
            "ideal_color": "azul",
            "brazilian_celebrity": "Anitta",
            "international_celebrity": "Zendaya",
        }

    def test_teaser_of_empty_result(self, pending_analysis):
        assert pending_analysis.teaser["mbti"] is None
        assert pending_analysis.teaser["passion_score"] is None


class TestSharing:
    def test_first_share_generates_token(self, completed_analysis):
        completed_analysis.set_public(True)

        assert completed_analysis.is_public is True
        assert len(completed_analysis.share_token) > 0

    def test_unshare_keeps_token(self, completed_analysis):
        completed_analysis.set_public(True)
        token = completed_analysis.share_token

        completed_analysis.set_public(False)
        completed_analysis.set_public(True)

        assert completed_analysis.share_token == token


class TestQuerySet:
    def test_for_owner(self, user, other_user):
        mine = AnalysisFactory(owner=user)
        AnalysisFactory(owner=other_user)

        assert list(Analysis.objects.for_owner(user)) == [mine]

    def test_in_progress(self, user):
        pending = AnalysisFactory(owner=user)
        CompletedAnalysisFactory(owner=user)

        assert list(Analysis.objects.in_progress()) == [pending]

    def test_shared_only_returns_public_completed(self, public_analysis, completed_analysis):
        assert list(Analysis.objects.shared()) == [public_analysis]
