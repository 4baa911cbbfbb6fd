"""Tests for the query codec."""

import math

from moviemeter.models import Filter, Origin
from moviemeter.presets import find_preset
from moviemeter import query_codec
from moviemeter.query_codec import decode, encode


SERIALIZED = ("list_id", "year", "min_rating", "min_votes", "max_items")


def serialized_fields(f: Filter):
    return tuple(getattr(f, name) for name in SERIALIZED)


class TestEncode:
    """Encoding a filter into its query string."""

    def test_popular_preset_encoding(self):
        """Fixed order, zero fields omitted, negative year kept."""
        popular = Filter(list_id="popular", year=-1, min_rating=6.0, min_votes=50000, max_items=20)
        assert encode(popular) == "list=popular&year=-1&rating=6&votes=50000&max=20"

    def test_unset_fields_are_omitted(self):
        assert encode(Filter(list_id="top", max_items=10)) == "list=top&max=10"

    def test_all_unset_encodes_to_empty(self):
        assert encode(Filter()) == ""

    def test_origin_is_never_encoded(self):
        nav = Filter(list_id="top", origin=Origin.NAVIGATION)
        assert encode(nav) == "list=top"

    def test_fractional_rating(self):
        assert encode(Filter(min_rating=7.5)) == "rating=7.5"

    def test_values_are_percent_encoded(self):
        assert encode(Filter(list_id="my list&x=1")) == "list=my%20list%26x%3D1"

    def test_uri_component_unreserved_characters_kept(self):
        assert encode(Filter(list_id="a-b_c.d!e~f*g'h(i)")) == "list=a-b_c.d!e~f*g'h(i)"

    def test_nan_rating_is_treated_as_unset(self):
        assert encode(Filter(list_id="top", min_rating=float("nan"))) == "list=top"

    def test_deterministic(self):
        f = Filter(list_id="ls027181777", year=2019)
        assert encode(f) == encode(f) == "list=ls027181777&year=2019"


class TestDecode:
    """Decoding query strings; never raises."""

    def test_decode_full_query(self):
        f = decode("?list=popular&year=-1&rating=6&votes=50000&max=20")
        assert f == Filter(
            list_id="popular", year=-1, min_rating=6.0, min_votes=50000, max_items=20, origin=Origin.NAVIGATION
        )

    def test_decode_without_question_mark(self):
        assert decode("list=top&max=10").max_items == 10

    def test_decode_tags_navigation_origin(self):
        assert decode("").origin is Origin.NAVIGATION
        assert decode(None).origin is Origin.NAVIGATION

    def test_missing_fields_default_to_unset(self):
        f = decode("?list=top")
        assert serialized_fields(f) == ("top", 0, 0.0, 0, 0)

    def test_unparsable_numbers_default_to_unset(self):
        f = decode("?year=abc&rating=high&votes=&max=-")
        assert (f.year, f.min_rating, f.min_votes, f.max_items) == (0, 0.0, 0, 0)

    def test_leading_number_prefix_is_used(self):
        f = decode("?year=2019abc&rating=7.5stars")
        assert f.year == 2019
        assert f.min_rating == 7.5

    def test_infinite_rating_is_unset(self):
        assert decode("?rating=1e999").min_rating == 0.0

    def test_first_occurrence_wins(self):
        assert decode("?list=top&list=popular").list_id == "top"

    def test_plus_and_percent_decoding(self):
        assert decode("?list=my+list%26x").list_id == "my list&x"

    def test_unknown_keys_ignored(self):
        f = decode("?name=Popular&fresh=True&list=top")
        assert serialized_fields(f) == ("top", 0, 0.0, 0, 0)

    def test_decoded_rating_is_finite(self):
        assert not math.isnan(decode("?rating=nan").min_rating)


class TestRoundTrip:
    """decode(encode(f)) reconstructs the serialized fields."""

    def test_all_fields_set_round_trip(self):
        f = Filter(list_id="ls027181777", year=2019, min_rating=7.25, min_votes=1200, max_items=50)
        assert serialized_fields(decode(encode(f))) == serialized_fields(f)

    def test_zero_votes_stays_zero(self):
        f = Filter(list_id="top", year=1990, min_rating=8.0, min_votes=0, max_items=10)
        assert "votes" not in encode(f)
        assert decode(encode(f)).min_votes == 0

    def test_presets_round_trip(self):
        for name in ("Popular", "Top 10", "Marvel Movies Since 2019"):
            preset = find_preset(name).filter
            assert serialized_fields(decode(encode(preset))) == serialized_fields(preset)


class TestPaths:
    """Address-bar and endpoint helpers."""

    def test_address_path(self):
        assert query_codec.address_path(Filter(list_id="top")) == "/?list=top"

    def test_address_path_for_empty_filter(self):
        assert query_codec.address_path(Filter()) == "/?"

    def test_results_path(self):
        assert query_codec.results_path(Filter(max_items=5)) == "/list.json?max=5"

    def test_share_url_strips_trailing_slash(self):
        url = query_codec.share_url("https://example.com/", Filter(list_id="top"))
        assert url == "https://example.com/list.json?list=top"


class TestListNameValidation:
    """Advisory list identifier check."""

    def test_valid_names(self):
        for name in ("popular", "top", "ls027181777", "", None):
            assert query_codec.is_list_name_valid(name)

    def test_invalid_names(self):
        for name in ("ls", "lsabc", "Popular", "top ", "popular\n", "tt123"):
            assert not query_codec.is_list_name_valid(name)
