"""
HTTP API tests using the Flask test client and an in-memory store
"""

from io import BytesIO
from unittest.mock import MagicMock

import pandas as pd
import pytest
from mysql.connector import Error

from app import create_app
from tests.conftest import FakeStore


@pytest.fixture
def client(scored_store):
    app = create_app('testing', db_manager=scored_store)
    return app.test_client()


class TestScoresApi:
    def test_submit_score(self, client, scored_store):
        response = client.post('/api/scores', json={
            'performanceId': 'P3', 'judgeId': 'J3',
            'scores': {'technical': 20, 'musical': 19, 'performance': 18,
                       'styling': 17, 'overall_impression': 16},
        })

        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert body['score']['total_score'] == 90
        assert len(scored_store.get_scores_by_performance('P3')) == 3

    def test_submit_out_of_range(self, client):
        response = client.post('/api/scores', json={
            'performanceId': 'P1', 'judgeId': 'J1', 'scores': [25, 10, 10, 10, 10],
        })
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_submit_unknown_performance(self, client):
        response = client.post('/api/scores', json={
            'performanceId': 'nope', 'judgeId': 'J1', 'scores': [10, 10, 10, 10, 10],
        })
        assert response.status_code == 404

    def test_submit_requires_json(self, client):
        response = client.post('/api/scores', data='judgeId=J1')
        assert response.status_code == 400

    def test_validate(self, client):
        response = client.post('/api/scores/validate', json={'scores': [10, 10, 10, 10, 10.5]})
        body = response.get_json()
        assert body['success'] is True
        assert body['formatted_total'] == '50.50'

    def test_performance_scores(self, client):
        body = client.get('/api/scores/performance/P1').get_json()
        assert len(body['scores']) == 2
        assert body['summary']['total_score'] == 170
        assert body['summary']['medal']['label'] == 'Legend'

    def test_remove_score(self, client):
        assert client.delete('/api/scores/P1/J1').status_code == 200
        assert client.delete('/api/scores/P1/J1').status_code == 404

    def test_scoring_config(self, client):
        body = client.get('/api/scores/config').get_json()
        assert body['config']['criterion_max'] == 20.0
        assert body['medal_tiers'][-1] == {'type': 'elite', 'label': 'Elite', 'level': 6, 'min_percentage': 95.0}


class TestRankingsApi:
    def test_global(self, client):
        body = client.get('/api/rankings').get_json()
        assert body['success'] is True
        assert [r['rank'] for r in body['rankings']] == [1, 2, 2, 4]

    def test_grouped(self, client):
        body = client.get('/api/rankings?groupBy=performanceType').get_json()
        assert body['group_by'] == ['performance_type']
        assert [r['rank'] for r in body['rankings']] == [1, 1, 1, 3]

    def test_filter_all_means_everything(self, client):
        body = client.get('/api/rankings?ageCategory=All&performanceType=Solo').get_json()
        assert body['count'] == 3

    def test_empty_result_is_success(self, client):
        response = client.get('/api/rankings?region=Gauteng')
        assert response.status_code == 200
        assert response.get_json() == {
            'success': True, 'rankings': [], 'count': 0,
            'filters': {'event_ids': [], 'region': 'Gauteng', 'age_category': None,
                        'performance_type': None, 'item_style': None},
            'group_by': [],
        }

    def test_bad_group_by(self, client):
        assert client.get('/api/rankings?groupBy=judge').status_code == 400

    def test_store_failure_is_500(self):
        store = MagicMock()
        store.get_ranking_candidates.side_effect = Error('gone')
        client = create_app('testing', db_manager=store).test_client()

        response = client.get('/api/rankings')
        assert response.status_code == 500
        assert response.get_json()['success'] is False

    def test_export(self, client):
        response = client.get('/api/rankings/export')

        assert response.status_code == 200
        assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        df = pd.read_excel(BytesIO(response.data), sheet_name='Rankings')
        assert list(df['Rank']) == ['1st', '2nd', '2nd', '4th']
        assert df['Medal'].iloc[0] == 'Elite'

    def test_scored_events(self, client):
        body = client.get('/api/rankings/events').get_json()
        assert body['success'] is True
        assert body['count'] == 1
        assert body['events'][0]['event_id'] == 'E1'
        assert body['events'][0]['score_count'] == 8

    def test_scored_events_store_failure(self):
        store = MagicMock()
        store.get_events_with_scores.side_effect = Error('gone')
        client = create_app('testing', db_manager=store).test_client()

        assert client.get('/api/rankings/events').status_code == 500


class TestFeesApi:
    def test_calculate(self, client):
        response = client.post('/api/fees/calculate', json={
            'performanceType': 'Duet',
            'masteryLevel': 'Fire (Advanced)',
            'participantIds': ['d1', 'd2'],
        })
        fee = response.get_json()['fee']
        assert fee['total_fee'] == 2 * 250 + 2 * 280
        assert fee['breakdown'] == 'Duet (R280 x 2 dancers)'

    def test_comma_separated_participants(self, client):
        response = client.post('/api/fees/calculate', json={
            'performanceType': 'Duet',
            'masteryLevel': 'Fire (Advanced)',
            'participantIds': 'd1, d2',
        })
        assert response.status_code == 200
        fee = response.get_json()['fee']
        assert fee['total_fee'] == 1060
        assert fee['registration_breakdown'] == 'Registration fee for 2 dancers'

    def test_missing_roster(self, client):
        response = client.post('/api/fees/calculate', json={
            'performanceType': 'Solo', 'masteryLevel': 'Water',
        })
        assert response.status_code == 400

    def test_bad_solo_count(self, client):
        response = client.post('/api/fees/calculate', json={
            'performanceType': 'Solo', 'masteryLevel': 'Water',
            'participantIds': ['d1'], 'soloCount': 0,
        })
        assert response.status_code == 400


class TestDancersApi:
    def test_mark_paid_then_fee_drops(self):
        client = create_app('testing', db_manager=FakeStore()).test_client()

        response = client.post('/api/dancers/d1/registration-fee', json={'masteryLevel': 'Water'})
        assert response.get_json()['record']['mastery_level'] == 'Water (Competitive)'

        fee = client.post('/api/fees/calculate', json={
            'performanceType': 'Solo', 'masteryLevel': 'Water', 'participantIds': ['d1'],
        }).get_json()['fee']
        assert fee['registration_fee'] == 0

        client.delete('/api/dancers/d1/registration-fee')
        status = client.get('/api/dancers/d1/registration-fee').get_json()['record']
        assert status['paid'] is False

    def test_registration_status_with_analysis(self):
        client = create_app('testing', db_manager=FakeStore()).test_client()
        client.post('/api/dancers/registration-fee/mark-paid',
                    json={'dancerIds': ['d1', 'd2'], 'masteryLevel': 'Fire'})

        body = client.post('/api/dancers/registration-status', json={
            'dancerIds': 'd1,d2,d3', 'masteryLevel': 'Fire',
        }).get_json()
        assert [r['paid'] for r in body['records']] == [True, True, False]
        assert body['analysis']['need_registration'] == ['d3']
        assert body['analysis']['registration_fee_required'] == 250


class TestPerformancesApi:
    def test_withdraw_and_restore(self, client, scored_store):
        response = client.post('/api/performances/P4/withdraw', json={'action': 'withdraw'})
        assert response.get_json()['withdrawn_from_judging'] is True
        ranked = [r['performance_id'] for r in client.get('/api/rankings').get_json()['rankings']]
        assert 'P4' not in ranked

        client.post('/api/performances/P4/withdraw', json={'action': 'restore'})
        assert scored_store.performances['P4'].withdrawn_from_judging is False

    def test_bad_action(self, client):
        response = client.post('/api/performances/P4/withdraw', json={'action': 'delete'})
        assert response.status_code == 400

    def test_item_number(self, client, scored_store):
        response = client.patch('/api/performances/P1', json={'itemNumber': 14})
        assert response.get_json()['item_number'] == 14
        assert scored_store.performances['P1'].item_number == 14
