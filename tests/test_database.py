"""
SQL layer tests with mocked connections
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from mysql.connector import Error

from config import TestingConfig
from core.rankings import RankingFilters
from database import DatabaseManager, TimedCursorWrapper
from db_modules.db_performances import (
    build_candidate_query, parse_json_list, row_to_performance, row_to_scored_event,
)
from db_modules.db_scores import row_to_score
from models import PerformancePatch
from tests.conftest import make_score


@pytest.fixture
def cursor():
    cursor = MagicMock()
    cursor.rowcount = 1
    cursor.lastrowid = 42
    cursor.fetchone.return_value = None
    cursor.fetchall.return_value = []
    return cursor


@pytest.fixture
def db(cursor):
    manager = DatabaseManager(TestingConfig)
    connection = MagicMock()
    connection.cursor.return_value = cursor
    manager.get_connection = MagicMock()
    manager.get_connection.return_value.__enter__.return_value = connection
    manager.connection = connection
    return manager


class TestUpdatePerformance:
    def test_patch_issues_single_parameterized_update(self, db, cursor):
        updated = db.update_performance('P1', PerformancePatch(item_number=7, withdrawn_from_judging=True))

        assert updated is True
        cursor.execute.assert_called_once_with(
            "UPDATE performances SET item_number = %s, withdrawn_from_judging = %s WHERE performance_id = %s",
            (7, True, 'P1'),
        )
        db.connection.commit.assert_called_once()

    def test_false_flag_is_written(self, db, cursor):
        db.update_performance('P1', PerformancePatch(withdrawn_from_judging=False))
        sql, params = cursor.execute.call_args[0]
        assert 'withdrawn_from_judging = %s' in sql
        assert 'item_number' not in sql
        assert params == (False, 'P1')

    def test_empty_patch_does_nothing(self, db, cursor):
        assert db.update_performance('P1', PerformancePatch()) is False
        cursor.execute.assert_not_called()

    def test_missing_row(self, db, cursor):
        cursor.rowcount = 0
        assert db.update_performance('P1', PerformancePatch(item_number=1)) is False


class TestCandidateQuery:
    def test_only_present_filters(self):
        query, params = build_candidate_query(RankingFilters(event_ids=['E1', 'E2'], region='Nationals'))

        assert 'p.event_id IN (%s, %s)' in query
        assert 'e.region = %s' in query
        assert 'e.age_category = %s' not in query
        assert params == ('E1', 'E2', 'Nationals')

    def test_no_filters(self):
        query, params = build_candidate_query(RankingFilters())
        assert 'withdrawn_from_judging' in query
        assert params == ()

    def test_filter_values_are_never_interpolated(self):
        query, params = build_candidate_query(RankingFilters(item_style="Ballet'; DROP TABLE scores; --"))
        assert 'DROP TABLE' not in query
        assert params == ("Ballet'; DROP TABLE scores; --",)


class TestEventsWithScores:
    def test_only_events_with_scores_newest_first(self, db, cursor):
        cursor.fetchall.return_value = [{
            'event_id': 'E1', 'name': 'Nationals', 'region': 'Nationals',
            'age_category': '10-12', 'performance_type': 'Solo',
            'event_date': date(2025, 7, 1), 'venue': None,
            'performance_count': 2, 'score_count': 4,
        }]

        events = db.get_events_with_scores()

        sql = cursor.execute.call_args[0][0]
        assert 'HAVING COUNT(DISTINCT s.score_id) > 0' in sql
        assert 'ORDER BY e.event_date DESC' in sql
        assert [e['event_id'] for e in events] == ['E1']

    def test_store_error_is_raised(self, db, cursor):
        cursor.execute.side_effect = Error('lost connection')
        with pytest.raises(Error):
            db.get_events_with_scores()


class TestUpsertScore:
    def test_first_submission_inserts(self, db, cursor):
        score = db.upsert_score(make_score('J1', 'P1', 80))

        assert score.score_id == 42
        assert cursor.execute.call_count == 2
        insert_sql = cursor.execute.call_args_list[1][0][0]
        assert 'ON DUPLICATE KEY UPDATE' in insert_sql
        assert 'version = version + 1' in insert_sql

    def test_resubmission_logs_modification(self, db, cursor):
        cursor.fetchone.return_value = {
            'score_id': 5,
            'technical_score': Decimal('10.00'), 'musical_score': Decimal('10.00'),
            'performance_score': Decimal('10.00'), 'styling_score': Decimal('10.00'),
            'overall_impression_score': Decimal('10.00'),
        }

        score = db.upsert_score(make_score('J1', 'P1', 90))

        assert score.score_id == 5
        assert cursor.execute.call_count == 3
        log_sql, log_params = cursor.execute.call_args_list[2][0]
        assert 'score_modification_logs' in log_sql
        assert log_params == (5, 'P1', 'J1', 50.0, 90.0, 'resubmission')

    def test_concurrent_first_submission_is_logged_as_resubmission(self, db, cursor):
        cursor.rowcount = 2
        cursor.lastrowid = 9

        score = db.upsert_score(make_score('J1', 'P1', 80))

        assert score.score_id == 9
        assert cursor.execute.call_count == 3
        insert_sql = cursor.execute.call_args_list[1][0][0]
        assert 'LAST_INSERT_ID(score_id)' in insert_sql
        log_params = cursor.execute.call_args_list[2][0][1]
        assert log_params == (9, 'P1', 'J1', None, 80.0, 'resubmission')

    def test_store_error_is_raised(self, db, cursor):
        cursor.execute.side_effect = Error('lost connection')
        with pytest.raises(Error):
            db.upsert_score(make_score('J1', 'P1', 80))


class TestDeleteScore:
    def test_missing_score(self, db, cursor):
        assert db.delete_score('P1', 'J1') is False
        db.connection.rollback.assert_called_once()

    def test_delete_logs_removal(self, db, cursor):
        cursor.fetchone.return_value = {
            'score_id': 3,
            'technical_score': 20, 'musical_score': 20, 'performance_score': 20,
            'styling_score': 20, 'overall_impression_score': 20,
        }
        assert db.delete_score('P1', 'J1') is True
        assert 'removal' in cursor.execute.call_args_list[2][0][1]


class TestScoreQueries:
    def test_scores_grouped_by_performance(self, db, cursor):
        base = {
            'score_id': 1, 'judge_id': 'J1', 'performance_id': 'P1',
            'technical_score': Decimal('18.50'), 'musical_score': Decimal('18'),
            'performance_score': Decimal('18'), 'styling_score': Decimal('18'),
            'overall_impression_score': Decimal('18'), 'comments': None,
            'submitted_at': None, 'updated_at': None,
        }
        cursor.fetchall.return_value = [base, dict(base, score_id=2, judge_id='J2'),
                                         dict(base, score_id=3, performance_id='P2')]

        scores = db.get_scores_for_performances(['P1', 'P2'])

        assert sorted(scores) == ['P1', 'P2']
        assert len(scores['P1']) == 2
        assert scores['P1'][0].technical_score == 18.5
        assert cursor.execute.call_args[0][1] == ('P1', 'P2')

    def test_no_ids_skips_query(self, db, cursor):
        assert db.get_scores_for_performances([]) == {}
        cursor.execute.assert_not_called()

    def test_row_to_score_converts_decimals(self):
        score = row_to_score({
            'score_id': 1, 'judge_id': 'J1', 'performance_id': 'P1',
            'technical_score': Decimal('20.00'), 'musical_score': Decimal('19.25'),
            'performance_score': Decimal('18'), 'styling_score': Decimal('17'),
            'overall_impression_score': Decimal('16'),
        })
        assert isinstance(score.musical_score, float)
        assert score.judge_total() == 90.25


class TestRegistrationFeeQueries:
    def test_save_paid_upserts(self, db, cursor):
        db.save_registration_fee_paid('d1', 'Fire (Advanced)', None)
        sql, params = cursor.execute.call_args[0]
        assert 'ON DUPLICATE KEY UPDATE' in sql
        assert params == ('d1', 'Fire (Advanced)', None)

    def test_record_mapping(self, db, cursor):
        cursor.fetchone.return_value = {
            'dancer_id': 'd1', 'registration_fee_paid': 1,
            'registration_fee_mastery_level': 'Water (Competitive)',
            'registration_fee_paid_at': None,
        }
        record = db.get_registration_fee_record('d1')
        assert record.paid is True
        assert record.satisfies('Water (Competitive)')


class TestRowMapping:
    def test_json_participant_lists(self):
        performance = row_to_performance({
            'performance_id': 'P1', 'event_id': 'E1',
            'participant_ids': '["d1", 2]', 'participant_names': '["Ann", "Bea"]',
            'withdrawn_from_judging': 0,
        })
        assert performance.participant_ids == ['d1', '2']
        assert performance.participant_names == ['Ann', 'Bea']
        assert performance.withdrawn_from_judging is False

    def test_contestant_type(self):
        performance = row_to_performance({
            'performance_id': 'P1', 'event_id': 'E1',
            'contestant_type': 'studio', 'studio_name': 'Dance Co',
        })
        assert performance.contestant_type == 'studio'
        assert performance.studio_name == 'Dance Co'

    def test_scored_event_counts_are_ints(self):
        event = row_to_scored_event({
            'event_id': 'E1', 'name': 'Nationals', 'region': 'Nationals',
            'age_category': '10-12', 'performance_type': 'Solo',
            'event_date': date(2025, 7, 1), 'venue': 'Civic Theatre',
            'performance_count': Decimal('3'), 'score_count': Decimal('6'),
        })
        assert event['event_date'] == '2025-07-01'
        assert event['performance_count'] == 3
        assert event['score_count'] == 6
        assert isinstance(event['score_count'], int)

    def test_bad_json_gives_empty_list(self):
        assert parse_json_list('{not json') == []
        assert parse_json_list('{"a": 1}') == []
        assert parse_json_list(None) == []


class TestTimedCursor:
    def test_delegates_execute(self):
        inner = MagicMock()
        wrapper = TimedCursorWrapper(inner, slow_threshold_ms=10_000)
        wrapper.execute('SELECT 1')
        inner.execute.assert_called_once_with('SELECT 1', None, False)
        assert wrapper.rowcount is inner.rowcount
