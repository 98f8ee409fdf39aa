"""
Tests for the Airport Directory read-through cache

Run: python -m pytest tests/test_airports.py -v
"""

from core.airports import AirportDirectory
from core.timezones import utc_offset_hours
from models.data_models import Airport


class CountingLoader:
    """Fake record source that remembers every lookup"""

    def __init__(self, airports):
        self.airports = {a.code: a for a in airports}
        self.calls = []

    def __call__(self, code):
        self.calls.append(code)
        return self.airports.get(code)


DOH = Airport(code='DOH', timezone='Asia/Qatar', latitude=25.26, longitude=51.56)
DEL = Airport(code='DEL', timezone='Asia/Kolkata', latitude=28.56, longitude=77.10)


class TestReadThroughCache:

    def test_hit_is_cached(self):
        loader = CountingLoader([DOH])
        directory = AirportDirectory(loader)

        assert directory.get('DOH') == DOH
        assert directory.get('doh') == DOH
        assert loader.calls == ['DOH']

    def test_miss_is_cached(self):
        loader = CountingLoader([DOH])
        directory = AirportDirectory(loader)

        assert directory.get('ZZZ') is None
        assert directory.get('ZZZ') is None
        assert loader.calls == ['ZZZ']
        assert directory.is_known('ZZZ') is False

    def test_loader_error_cached_as_miss(self):
        calls = []

        def broken(code):
            calls.append(code)
            raise ConnectionError("lookup service down")

        directory = AirportDirectory(broken)
        assert directory.get('DEL') is None
        assert directory.get('DEL') is None
        assert calls == ['DEL']

    def test_blank_code(self):
        loader = CountingLoader([])
        assert AirportDirectory(loader).get('  ') is None
        assert loader.calls == []

    def test_malformed_code_never_loaded_or_cached(self):
        loader = CountingLoader([DOH])
        directory = AirportDirectory(loader)

        for code in ('TOOLONG', 'DO', 'D-H', 'OTHH'):
            assert directory.get(code) is None
        assert loader.calls == []
        assert directory._cache == {}

    def test_custom_override_may_use_any_code(self):
        loader = CountingLoader([])
        directory = AirportDirectory(loader)
        directory.add_custom('othh', 'Asia/Qatar')

        assert directory.get('OTHH').timezone == 'Asia/Qatar'
        assert loader.calls == []

    def test_get_many_returns_found_only(self):
        directory = AirportDirectory(CountingLoader([DOH, DEL]))
        found = directory.get_many(['DOH', 'del', 'XXX'])
        assert set(found) == {'DOH', 'DEL'}
        assert sorted(a.code for a in directory.cached()) == ['DEL', 'DOH']

    def test_custom_override_wins(self):
        loader = CountingLoader([DOH])
        directory = AirportDirectory(loader)
        directory.add_custom('doh', 'UTC', name='Test field')

        assert directory.get('DOH').timezone == 'UTC'
        assert loader.calls == []

    def test_clear_forgets_misses(self):
        loader = CountingLoader([])
        directory = AirportDirectory(loader)
        directory.get('ABC')
        directory.clear()
        directory.get('ABC')
        assert loader.calls == ['ABC', 'ABC']


class TestAirportsdataSource:

    def test_default_loader_resolves_iata(self):
        airport = AirportDirectory().get('DOH')
        assert airport is not None
        assert airport.timezone == 'Asia/Qatar'

    def test_offset_through_timezone_utils(self):
        assert utc_offset_hours(DEL.timezone, '2025-03-15T02:00:00Z') == 5.5
        assert utc_offset_hours(DOH.timezone, '2025-03-15T02:00:00') == 3.0
