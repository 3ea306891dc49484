"""
Unit tests for EntityStore

Tests row normalisation, aggregate exclusion and the constrained-device
filter.
"""
import pytest
from forcebubbles.store import EntityStore, process_row, filter_constrained

pytestmark = pytest.mark.unit


YEARS = (2000, 2002)


class TestProcessRow:
    """Tests for process_row"""

    def test_processed_row_passthrough(self):
        """Already processed rows keep their values as floats"""
        row = process_row({'code': 'USA', 'name': 'United States', 'dseries': [1, 2, 3]}, YEARS)
        assert row == {'code': 'USA', 'name': 'United States', 'dseries': [1.0, 2.0, 3.0]}

    def test_short_series_padded_with_zero(self):
        """Missing trailing years become 0"""
        row = process_row({'code': 'USA', 'name': 'US', 'dseries': [5]}, YEARS)
        assert row['dseries'] == [5.0, 0.0, 0.0]

    def test_long_series_truncated(self):
        """Values beyond the year range are ignored"""
        row = process_row({'code': 'USA', 'name': 'US', 'dseries': [1, 2, 3, 4, 5]}, YEARS)
        assert row['dseries'] == [1.0, 2.0, 3.0]

    def test_unparsable_values_become_zero(self):
        """Blank, '..', None and NaN all coerce to 0"""
        row = process_row({'code': 'SSD', 'name': 'South Sudan',
                           'dseries': ['', '..', None]}, YEARS)
        assert row['dseries'] == [0.0, 0.0, 0.0]

        row = process_row({'code': 'SSD', 'name': 'South Sudan',
                           'dseries': [float('nan'), '12', float('inf')]}, YEARS)
        assert row['dseries'] == [0.0, 12.0, 0.0]

    def test_raw_table_row(self):
        """Raw rows use 'Country Code', 'Country Name' and year keys"""
        raw = {'Country Code': 'CAN', 'Country Name': 'Canada',
               '2000': '30685730', 2001: 31020902}
        row = process_row(raw, YEARS)
        assert row['code'] == 'CAN'
        assert row['name'] == 'Canada'
        assert row['dseries'] == [30685730.0, 31020902.0, 0.0]

    def test_series_length_matches_range(self):
        """Every row has exactly end - start + 1 values"""
        row = process_row({'code': 'X', 'name': 'X', 'dseries': []}, (1960, 2016))
        assert len(row['dseries']) == 57


class TestFilterConstrained:
    """Tests for filter_constrained"""

    def test_threshold_is_inclusive(self):
        rows = [
            {'code': 'A', 'name': 'A', 'dseries': [499999.0, 1e9]},
            {'code': 'B', 'name': 'B', 'dseries': [500000.0, 0.0]},
        ]
        assert [r['code'] for r in filter_constrained(rows, 500000)] == ['B']

    def test_only_first_year_counts(self):
        """A small first year drops the entity even if it grows later"""
        rows = [{'code': 'A', 'name': 'A', 'dseries': [10.0, 1e9, 1e9]}]
        assert filter_constrained(rows, 500000) == []


class TestEntityStore:
    """Tests for EntityStore.from_rows"""

    def test_aggregates_excluded(self, usa_rows):
        store = EntityStore.from_rows(usa_rows, YEARS)
        assert store.ids == ['USA']
        assert [row['code'] for row in store.data] == ['USA']

    def test_entities_keep_input_order(self):
        rows = [{'code': code, 'name': code, 'dseries': [1, 1, 1]}
                for code in ['NGA', 'AUS', 'EUU', 'BRA']]
        store = EntityStore.from_rows(rows, YEARS)
        assert store.ids == ['NGA', 'AUS', 'BRA']
        assert len(store) == 3

    def test_entity_series_and_start_year(self, usa_rows):
        entity = next(iter(EntityStore.from_rows(usa_rows, YEARS)))
        assert entity.series == (100.0, 400.0, 900.0)
        assert entity.start_year == 2000
        assert entity.end_year == 2002
        assert entity.value_at(2001) == 400.0

    def test_constrained_filters_entities_not_data(self):
        """Constrained devices drop small entities from the layout only"""
        rows = [
            {'code': 'CHN', 'name': 'China', 'dseries': [1.26e9, 1.27e9, 1.28e9]},
            {'code': 'TUV', 'name': 'Tuvalu', 'dseries': [9419, 9500, 9600]},
        ]
        store = EntityStore.from_rows(rows, YEARS, constrained=True, threshold=500000)
        assert store.ids == ['CHN']
        assert [row['code'] for row in store.data] == ['CHN', 'TUV']

    def test_unconstrained_keeps_small_entities(self):
        rows = [{'code': 'TUV', 'name': 'Tuvalu', 'dseries': [9419, 9500, 9600]}]
        assert EntityStore.from_rows(rows, YEARS).ids == ['TUV']

    def test_duplicate_codes_keep_first_row(self, caplog):
        """Ids stay unique so every entity is reachable through the state index"""
        rows = [
            {'code': 'USA', 'name': 'a', 'dseries': [1, 1, 1]},
            {'code': 'CAN', 'name': 'Canada', 'dseries': [2, 2, 2]},
            {'code': 'USA', 'name': 'b', 'dseries': [3, 3, 3]},
        ]
        with caplog.at_level('WARNING', logger='forcebubbles.store'):
            store = EntityStore.from_rows(rows, YEARS)
        assert store.ids == ['USA', 'CAN']
        assert store.entities[0].name == 'a'
        assert [row['name'] for row in store.data] == ['a', 'Canada']
        assert 'Duplicate code USA' in caplog.text

    def test_rows_without_code_skipped(self, caplog):
        """Raw rows with no 'Country Code' never become entities"""
        rows = [
            {'Country Name': 'Nowhere', '2000': '5'},
            {'Country Code': '', 'Country Name': 'Blank', '2000': '6'},
            {'Country Code': 'CAN', 'Country Name': 'Canada', '2000': '7'},
        ]
        with caplog.at_level('WARNING', logger='forcebubbles.store'):
            store = EntityStore.from_rows(rows, YEARS)
        assert store.ids == ['CAN']
        assert [row['code'] for row in store.data] == ['CAN']
        assert 'without a code' in caplog.text

    def test_empty_input(self):
        store = EntityStore.from_rows([], YEARS)
        assert len(store) == 0
        assert store.data == []
