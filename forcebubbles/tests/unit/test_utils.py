"""
Unit tests for lookup tables and utility functions
"""
import math
import pytest
from forcebubbles.data import EXCLUDED_CODES, is_excluded, resource_key
from forcebubbles.utils import flag_href, coerce_value

pytestmark = pytest.mark.unit


class TestExclusion:
    """Tests for the aggregate exclusion set"""

    @pytest.mark.parametrize("code", ['WLD', 'EUU', 'HIC', 'SAS', 'OED', 'SSF'])
    def test_aggregates_excluded(self, code):
        assert is_excluded(code)

    @pytest.mark.parametrize("code", ['USA', 'CHN', 'SSD', 'XKX', 'CHI'])
    def test_entities_kept(self, code):
        assert not is_excluded(code)

    def test_codes_are_iso3_shaped(self):
        assert all(len(code) == 3 and code.isupper() for code in EXCLUDED_CODES)


class TestResourceKey:
    """Tests for resource_key"""

    def test_lowercase_iso2(self):
        assert resource_key('USA') == 'us'
        assert resource_key('GBR') == 'gb'
        assert resource_key('XKX') == 'xk'

    def test_unknown_code(self):
        """Codes without a flag have no resource key"""
        assert resource_key('CHI') is None
        assert resource_key('') is None


class TestFlagHref:
    """Tests for flag_href"""

    def test_default_directory(self):
        assert flag_href('USA') == 'img/us.svg'

    def test_custom_directory(self):
        assert flag_href('FRA', image_dir='static/flags') == 'static/flags/fr.svg'

    def test_missing_flag(self):
        assert flag_href('CHI') == ''


class TestCoerceValue:
    """Tests for coerce_value"""

    @pytest.mark.parametrize("raw,expected", [
        (12, 12.0),
        ('3.5', 3.5),
        (' 42 ', 42.0),
        ('', 0.0),
        ('..', 0.0),
        (None, 0.0),
        (True, 0.0),
        (float('nan'), 0.0),
        (float('-inf'), 0.0),
    ])
    def test_coercion(self, raw, expected):
        assert coerce_value(raw) == expected

    def test_negative_values_kept(self):
        """Negatives survive coercion; radius mapping clamps them"""
        assert coerce_value('-5') == -5.0

    def test_result_is_finite_float(self):
        value = coerce_value('1e400')
        assert isinstance(value, float)
        assert math.isfinite(value)
