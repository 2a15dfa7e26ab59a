"""
Tests for tournament bucketing, sorting, filtering, league rounds and
Stay & Play housing alerts.
"""

from datetime import date, datetime, timedelta

from tournament_hub.models.league import League
from tournament_hub.models.tournament import Tournament
from tournament_hub.services.tournament_buckets import (
    NO_AGE_DIVISION,
    UNASSIGNED_ROUND,
    bucket_tournaments,
    filter_tournaments,
    group_league_rounds,
    housing_alerts,
    housing_status,
    sort_tournaments,
    upcoming_league_tournaments,
)

TODAY = date(2026, 3, 10)


def _t(id, name=None, start=None, status="Not Started", **kwargs):
    return Tournament(id=id, name=name or f"T{id}", start_date=start, status=status, **kwargs)


class TestBucketTournaments:
    def test_precedence(self):
        tournaments = [
            _t(1, start=date(2026, 3, 20)),  # this month
            _t(2, start=date(2026, 3, 2)),  # this month, already started
            _t(3, start=date(2026, 4, 5)),  # upcoming
            _t(4, start=date(2026, 2, 1)),  # past
            _t(5, start=date(2026, 3, 20), status="Complete"),  # complete wins over this month
            _t(6),  # undated, not complete
            _t(7, status="Complete"),  # undated, complete
        ]
        buckets = bucket_tournaments(tournaments, TODAY)

        assert [t.id for t in buckets.this_month] == [1, 2]
        assert [t.id for t in buckets.upcoming] == [3, 6]
        assert [t.id for t in buckets.past] == [4, 5, 7]

    def test_partition_excludes_league_tournaments(self):
        tournaments = [
            _t(1, start=date(2026, 3, 20)),
            _t(2, start=date(2026, 5, 1), league_id=3),
            _t(3, start=date(2025, 1, 1)),
            _t(4),
        ]
        buckets = bucket_tournaments(tournaments, TODAY)

        league_less = [t for t in tournaments if not t.league_id]
        assert len(buckets.upcoming) + len(buckets.this_month) + len(buckets.past) == len(league_less)
        all_ids = [t.id for t in buckets.upcoming + buckets.this_month + buckets.past]
        assert 2 not in all_ids
        assert sorted(all_ids) == [1, 3, 4]

    def test_gender_by_age(self):
        tournaments = [
            _t(1, age_division_focus="U12", gender_focus="Boys"),
            _t(2, age_division_focus="U12", gender_focus="Girls"),
            _t(3, gender_focus="Boys"),
            _t(4, age_division_focus="U14", gender_focus="Mixed"),
            _t(5, age_division_focus="U12", gender_focus="Boys", league_id=1),
        ]
        buckets = bucket_tournaments(tournaments, TODAY)

        assert {k: [t.id for t in v] for k, v in buckets.boys_by_age.items()} == {"U12": [1], NO_AGE_DIVISION: [3]}
        assert {k: [t.id for t in v] for k, v in buckets.girls_by_age.items()} == {"U12": [2]}


class TestSortAndFilter:
    def test_date_sorts_put_undated_at_opposite_ends(self):
        tournaments = [_t(1, start=date(2026, 5, 1)), _t(2), _t(3, start=date(2026, 1, 1))]

        assert [t.id for t in sort_tournaments(tournaments, "date-asc")] == [3, 1, 2]
        assert [t.id for t in sort_tournaments(tournaments, "date-desc")] == [2, 1, 3]

    def test_name_and_status_sorts(self):
        tournaments = [
            _t(1, name="bravo", status="Complete"),
            _t(2, name="Alpha", status="In Progress"),
            _t(3, name="charlie", status="Not Started"),
        ]

        assert [t.id for t in sort_tournaments(tournaments, "name-asc")] == [2, 1, 3]
        assert [t.id for t in sort_tournaments(tournaments, "name-desc")] == [3, 1, 2]
        assert [t.id for t in sort_tournaments(tournaments, "status")] == [3, 2, 1]

    def test_unknown_sort_keeps_order(self):
        tournaments = [_t(2), _t(1)]
        assert [t.id for t in sort_tournaments(tournaments, "bogus")] == [2, 1]

    def test_housing_filter_and_search(self):
        tournaments = [
            _t(1, name="Desert Shootout", location="Phoenix", housing_required=True),
            _t(2, name="Local Jam", location="Home", housing_required=False),
            _t(3, name="Coastal Cup", housing_partner="Phoenix Stays", housing_required=True),
        ]

        assert [t.id for t in filter_tournaments(tournaments)] == [1, 3]
        assert [t.id for t in filter_tournaments(tournaments, show_no_housing=True)] == [1, 2, 3]
        assert [t.id for t in filter_tournaments(tournaments, search="phoenix")] == [1, 3]
        assert [t.id for t in filter_tournaments(tournaments, show_no_housing=True, search="jam")] == [2]


class TestLeagueRounds:
    def test_groups_follow_league_round_order(self):
        league = League(id=1, name="Spring League", age_divisions=["U12"], rounds=["League 1", "League 2"])
        tournaments = [
            _t(1, name="B", start=date(2026, 4, 1), league_id=1, round_name="League 2"),
            _t(2, name="A", start=date(2026, 3, 1), league_id=1, round_name="League 1"),
            _t(3, name="C", league_id=1, round_name="League 1"),
            _t(4, name="D", league_id=1, round_name="Finals"),
            _t(5, name="E", league_id=1),
        ]
        groups = group_league_rounds(league, tournaments)

        assert [g.round_name for g in groups] == ["League 1", "League 2", UNASSIGNED_ROUND]
        assert [t.id for t in groups[0].tournaments] == [2, 3]
        assert [t.id for t in groups[1].tournaments] == [1]
        assert [t.id for t in groups[2].tournaments] == [4, 5]

    def test_no_unassigned_group_when_empty(self):
        league = League(id=1, name="L", age_divisions=["U12"], rounds=["League 1"])
        groups = group_league_rounds(league, [_t(1, league_id=1, round_name="League 1")])
        assert [g.round_name for g in groups] == ["League 1"]

    def test_upcoming_league_tournaments(self):
        tournaments = [
            _t(1, start=date(2026, 3, 12), league_id=1),
            _t(2, start=date(2026, 3, 1), league_id=1, status="In Progress"),
            _t(3, start=date(2026, 2, 1), league_id=1),
            _t(4, start=date(2026, 4, 1), league_id=1),
            _t(5, start=date(2026, 5, 1), league_id=1),
            _t(6, start=date(2026, 3, 15), league_id=2),
            _t(7, league_id=1),
        ]
        upcoming = upcoming_league_tournaments(tournaments, 1, TODAY)
        assert [t.id for t in upcoming] == [2, 1, 4]


class TestHousingAlerts:
    NOW = datetime(2026, 3, 10, 9, 0)

    def test_alert_window(self):
        tournaments = [
            _t(1, stay_play_required=True, housing_opens_date=self.NOW + timedelta(days=2)),
            _t(2, stay_play_required=True, housing_opens_date=self.NOW + timedelta(days=5)),
            _t(3, stay_play_required=True, housing_opens_date=self.NOW + timedelta(days=1), housing_email_sent=True),
            _t(4, stay_play_required=False, housing_opens_date=self.NOW + timedelta(days=1)),
            _t(5, stay_play_required=True),
        ]
        assert [t.id for t in housing_alerts(tournaments, self.NOW)] == [1]

    def test_housing_status_labels(self):
        assert housing_status(_t(1), self.NOW) is None
        assert housing_status(_t(2, housing_opens_date=self.NOW - timedelta(hours=1)), self.NOW) == "Housing Open"
        assert (
            housing_status(_t(3, housing_opens_date=self.NOW + timedelta(days=2, hours=1)), self.NOW)
            == "Opens in 2 days - Send Email!"
        )
        assert (
            housing_status(_t(4, housing_opens_date=self.NOW + timedelta(days=10)), self.NOW)
            == "Housing Opens Soon"
        )
