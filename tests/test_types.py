import pytest

from ormspec.exceptions import MalformedCatalogDataError
from ormspec.types import TYPE_ALIASES, Custom, Limit, Range, SqlType


class TestSqlType:
    def test_str_is_canonical_spelling(self):
        assert str(SqlType.VARCHAR) == "varchar"
        assert str(SqlType.TIMESTAMP_TZ) == "timestamptz"

    def test_lookup_by_value(self):
        assert SqlType("text[]") is SqlType.TEXT_ARRAY

    @pytest.mark.parametrize(
        "spelling,expected",
        [
            ("int", SqlType.INT),
            ("integer", SqlType.INT),
            ("character varying", SqlType.VARCHAR),
            ("varchar", SqlType.VARCHAR),
            ("timestamp without time zone", SqlType.TIMESTAMP),
            ("timestamp with time zone", SqlType.TIMESTAMP_TZ),
            ("year", SqlType.SMALLINT),
            ("double precision", SqlType.DOUBLE),
        ],
    )
    def test_aliases(self, spelling, expected):
        assert TYPE_ALIASES[spelling] is expected

    def test_every_member_resolves_from_its_canonical_spelling(self):
        for sql_type in SqlType:
            assert TYPE_ALIASES[sql_type.value] is sql_type


class TestCustom:
    def test_keeps_raw_string(self):
        t = Custom("mpaa_rating")
        assert t.raw == "mpaa_rating"
        assert str(t) == "mpaa_rating"

    def test_equality(self):
        assert Custom("tsvector") == Custom("tsvector")
        assert Custom("tsvector") != SqlType.TEXT


class TestCapacity:
    def test_limit(self):
        c = Limit(45)
        assert c.limit == 45
        assert str(c) == "45"

    def test_range(self):
        c = Range(precision=4, scale=2)
        assert (c.precision, c.scale) == (4, 2)
        assert str(c) == "4,2"

    @pytest.mark.parametrize("invalid", ["45", 4.5, True, None])
    def test_limit_requires_integer(self, invalid):
        with pytest.raises(MalformedCatalogDataError, match="Limit must be an integer"):
            Limit(invalid)

    def test_range_requires_integers(self):
        with pytest.raises(MalformedCatalogDataError, match="Range scale"):
            Range(precision=4, scale="2")  # type: ignore[arg-type]
