"""
Pytest configuration and fixtures for the competition scoring tests
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import Performance, RegistrationFeeRecord, Score  # noqa: E402


class FakeStore:
    """In-memory store with the same methods DatabaseManager exposes"""

    def __init__(self, performances=None, scores=None, registration_records=None):
        self.performances = {p.performance_id: p for p in (performances or [])}
        self.scores = {}
        for score in scores or []:
            self.scores[(score.judge_id, score.performance_id)] = score
        self.registration_records = {r.dancer_id: r for r in (registration_records or [])}
        self.patches = []
        self.next_score_id = 1

    # performances
    def get_performance_by_id(self, performance_id):
        return self.performances.get(performance_id)

    def get_ranking_candidates(self, filters):
        return [p for p in self.performances.values() if filters.matches(p)]

    def update_performance(self, performance_id, patch):
        self.patches.append((performance_id, patch.fields()))
        performance = self.performances.get(performance_id)
        if performance is None or patch.is_empty():
            return False
        for column, value in patch.fields():
            setattr(performance, column, value)
        return True

    # scores
    def upsert_score(self, score):
        key = (score.judge_id, score.performance_id)
        existing = self.scores.get(key)
        if existing is not None:
            score.score_id = existing.score_id
        else:
            score.score_id = self.next_score_id
            self.next_score_id += 1
        self.scores[key] = score
        return score

    def delete_score(self, performance_id, judge_id):
        return self.scores.pop((judge_id, performance_id), None) is not None

    def get_scores_by_performance(self, performance_id):
        return [s for s in self.scores.values() if s.performance_id == performance_id]

    def get_scores_for_performances(self, performance_ids):
        result = {}
        for score in self.scores.values():
            if score.performance_id in performance_ids:
                result.setdefault(score.performance_id, []).append(score)
        return result

    # registration fees
    def get_registration_fee_record(self, dancer_id):
        return self.registration_records.get(dancer_id)

    def get_registration_fee_records(self, dancer_ids):
        return [self.registration_records[d] for d in dancer_ids if d in self.registration_records]

    def save_registration_fee_paid(self, dancer_id, mastery_level, paid_at):
        self.registration_records[dancer_id] = RegistrationFeeRecord(
            dancer_id=dancer_id, paid=True, mastery_level=mastery_level, paid_at=paid_at
        )
        return True

    def get_events_with_scores(self):
        events = {}
        for performance in self.performances.values():
            event = events.setdefault(performance.event_id, {
                'event_id': performance.event_id,
                'name': performance.event_name,
                'region': performance.region,
                'age_category': performance.age_category,
                'performance_type': performance.performance_type,
                'event_date': None,
                'venue': None,
                'performance_count': 0,
                'score_count': 0,
            })
            event['performance_count'] += 1
            event['score_count'] += sum(
                1 for s in self.scores.values() if s.performance_id == performance.performance_id
            )
        return sorted((e for e in events.values() if e['score_count'] > 0), key=lambda e: e['name'] or '')

    def clear_registration_fee(self, dancer_id):
        if dancer_id not in self.registration_records:
            return False
        self.registration_records[dancer_id] = RegistrationFeeRecord(dancer_id=dancer_id, paid=False)
        return True


def make_score(judge_id, performance_id, total=None, criteria=None):
    """Build a Score; `total` is split evenly over the five criteria"""
    if criteria is None:
        criteria = [total / 5.0] * 5
    return Score(
        judge_id=judge_id,
        performance_id=performance_id,
        technical_score=criteria[0],
        musical_score=criteria[1],
        performance_score=criteria[2],
        styling_score=criteria[3],
        overall_impression_score=criteria[4],
        submitted_at=datetime(2025, 7, 1, 10, 0),
        updated_at=datetime(2025, 7, 1, 10, 0),
    )


def make_performance(performance_id, event_id='E1', region='Nationals', age_category='10-12',
                     performance_type='Solo', item_style='Ballet', participant_names=None,
                     contestant_name=None, withdrawn=False, **kwargs):
    return Performance(
        performance_id=performance_id,
        event_id=event_id,
        title=kwargs.pop('title', f'Routine {performance_id}'),
        participant_ids=kwargs.pop('participant_ids', ['D-' + performance_id]),
        participant_names=participant_names if participant_names is not None else ['Dancer ' + performance_id],
        contestant_name=contestant_name,
        item_style=item_style,
        withdrawn_from_judging=withdrawn,
        event_name=kwargs.pop('event_name', f'Event {event_id}'),
        region=region,
        age_category=age_category,
        performance_type=performance_type,
        **kwargs
    )


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def scored_store():
    """Three solo performances and one duet with judge scores"""
    performances = [
        make_performance('P1'),
        make_performance('P2'),
        make_performance('P3'),
        make_performance('P4', performance_type='Duet', participant_names=['Ann', 'Bea']),
    ]
    scores = [
        make_score('J1', 'P1', 90), make_score('J2', 'P1', 80),
        make_score('J1', 'P2', 85), make_score('J2', 'P2', 85),
        make_score('J1', 'P3', 70), make_score('J2', 'P3', 75),
        make_score('J1', 'P4', 96), make_score('J2', 'P4', 94),
    ]
    return FakeStore(performances=performances, scores=scores)
