"""
Tests for region species counts (resolve → aggregate).
"""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock, patch

import requests

from biodiversity_explorer.datasources.inaturalist import species_counts
from biodiversity_explorer.datasources.inaturalist.parsing import parse_aggregate, parse_aggregates
from biodiversity_explorer.datasources.inaturalist.places import PlaceResolver
from biodiversity_explorer.schemas import OccurrenceAggregate, TaxonSummary

# =============================================================================
# Fixtures / Sample API Responses
# =============================================================================

NAIROBI_AUTOCOMPLETE: dict = {
    "results": [
        {"id": 4040, "name": "Nairobi", "display_name": "Nairobi, US"},
        {"id": 929, "name": "Nairobi", "display_name": "Nairobi, Kenya"},
    ],
}

SAMPLE_SPECIES_COUNTS_RESPONSE: dict = {
    "total_results": 3,
    "page": 1,
    "per_page": 60,
    "results": [
        {
            "count": 812,
            "taxon": {
                "id": 12716,
                "name": "Turdus pelios",
                "preferred_common_name": "African Thrush",
                "rank": "species",
                "iconic_taxon_name": "Aves",
                "default_photo": {
                    "medium_url": "https://inaturalist-open-data.s3.amazonaws.com/photos/1/medium.jpg",
                },
            },
        },
        {
            "count": 301,
            "taxon": {
                "id": 55401,
                "name": "Lantana camara",
                "rank": "species",
                "iconic_taxon_name": "Plantae",
                "default_photo": None,
            },
        },
        {
            "count": 44,
            "taxon": {
                "id": 81234,
                "name": "Agama lionotus",
                "preferred_common_name": "",
            },
        },
    ],
}


def _response(payload: dict) -> Mock:
    resp = Mock()
    resp.json.return_value = payload
    resp.raise_for_status = Mock()
    return resp


def _fake_inat(autocomplete: dict, counts: dict) -> Any:
    """session.get replacement routing by endpoint."""

    def fake_get(url: str, params: dict | None = None, **_: Any) -> Mock:
        if url.endswith("/places/autocomplete"):
            return _response(autocomplete)
        if url.endswith("/observations/species_counts"):
            return _response(counts)
        raise AssertionError(f"unexpected URL {url}")

    return fake_get


# =============================================================================
# Parsing
# =============================================================================


class TestParseAggregate:
    """Test species_counts entry normalization."""

    def test_full_record(self) -> None:
        agg = parse_aggregate(SAMPLE_SPECIES_COUNTS_RESPONSE["results"][0])
        assert agg is not None
        assert agg.observation_count == 812
        assert agg.taxon.id == 12716
        assert agg.taxon.scientific_name == "Turdus pelios"
        assert agg.taxon.common_name == "African Thrush"
        assert agg.taxon.iconic_group == "Aves"
        assert agg.taxon.photo_url is not None

    def test_missing_fields_become_none(self) -> None:
        agg = parse_aggregate(SAMPLE_SPECIES_COUNTS_RESPONSE["results"][1])
        assert agg is not None
        assert agg.taxon.common_name is None
        assert agg.taxon.photo_url is None

    def test_blank_common_name_and_no_iconic_group(self) -> None:
        agg = parse_aggregate(SAMPLE_SPECIES_COUNTS_RESPONSE["results"][2])
        assert agg is not None
        assert agg.taxon.common_name is None
        assert agg.taxon.iconic_group is None
        assert agg.taxon.display_name == "Agama lionotus"

    def test_entry_without_taxon_is_dropped(self) -> None:
        assert parse_aggregate({"count": 3}) is None
        assert parse_aggregate({"count": 3, "taxon": {"name": "No id"}}) is None

    def test_bad_count_defaults_to_zero(self) -> None:
        agg = parse_aggregate({"count": None, "taxon": {"id": 1, "name": "Animalia"}})
        assert agg is not None
        assert agg.observation_count == 0

    def test_keeps_provider_order(self) -> None:
        aggregates = parse_aggregates(SAMPLE_SPECIES_COUNTS_RESPONSE)
        assert [a.taxon.id for a in aggregates] == [12716, 55401, 81234]


# =============================================================================
# Query building
# =============================================================================


class TestBuildParams:
    """Test species_counts query params."""

    def test_fixed_constraints(self) -> None:
        params = species_counts.build_species_count_params("929", None, 60)
        assert params["place_id"] == "929"
        assert params["per_page"] == 60
        assert params["page"] == 1
        assert params["verifiable"] == "true"
        assert params["photos"] == "true"
        assert params["order_by"] == "observations_count"
        assert params["hrank"] == "species"
        assert params["lrank"] == "species"
        assert "taxon_id" not in params

    def test_taxon_scope(self) -> None:
        params = species_counts.build_species_count_params("929", 3, 20, page=2)
        assert params["taxon_id"] == 3
        assert params["page"] == 2

    def test_page_size_capped(self) -> None:
        params = species_counts.build_species_count_params("929", None, 5000)
        assert params["per_page"] == 500


# =============================================================================
# End to end
# =============================================================================


class TestGetAggregates:
    """Test the resolve → aggregate chain."""

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.get")
    def test_nairobi_most_observed_first(self, mock_get: Mock) -> None:
        mock_get.side_effect = _fake_inat(NAIROBI_AUTOCOMPLETE, SAMPLE_SPECIES_COUNTS_RESPONSE)

        result = species_counts.get_aggregates("Nairobi", None, 60)

        assert len(result) == 3
        counts = [a.observation_count for a in result]
        assert all(counts[0] >= c for c in counts[1:])
        assert counts == sorted(counts, reverse=True)
        params = mock_get.call_args_list[-1].kwargs["params"]
        assert params["place_id"] == "929"
        assert params["per_page"] == 60

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.get")
    def test_unresolved_region_returns_empty(self, mock_get: Mock) -> None:
        mock_get.side_effect = _fake_inat({"results": []}, SAMPLE_SPECIES_COUNTS_RESPONSE)

        result = species_counts.get_aggregates("ZzzNoSuchPlace123", None, 60)

        assert result == []
        assert mock_get.call_count == 1  # species_counts never queried

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.get")
    def test_resolution_failure_returns_empty(self, mock_get: Mock) -> None:
        mock_get.side_effect = requests.Timeout("timed out")

        assert species_counts.get_aggregates("Nairobi") == []

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.get")
    def test_species_counts_failure_returns_empty(self, mock_get: Mock) -> None:
        failing = _response({})
        failing.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        mock_get.side_effect = [_response(NAIROBI_AUTOCOMPLETE), failing]

        assert species_counts.get_aggregates("Nairobi") == []

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.get")
    def test_invalid_json_returns_empty(self, mock_get: Mock) -> None:
        broken = _response({})
        broken.json.side_effect = ValueError("Expecting value")
        mock_get.side_effect = [_response(NAIROBI_AUTOCOMPLETE), broken]

        assert species_counts.get_aggregates("Nairobi") == []

    @patch("biodiversity_explorer.datasources.inaturalist.species_counts.fetch_species_counts")
    def test_uses_given_resolver(self, mock_fetch: Mock) -> None:
        mock_fetch.return_value = []
        resolver = PlaceResolver(overrides={"Nairobi": "929"})

        species_counts.get_aggregates("Nairobi", 3, 10, 2, resolver=resolver)

        mock_fetch.assert_called_once_with("929", 3, 10, 2)

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.get")
    def test_zero_limit_skips_species_counts(self, mock_get: Mock) -> None:
        assert species_counts.fetch_species_counts("929", limit=0) == []
        mock_get.assert_not_called()


# =============================================================================
# Filtering
# =============================================================================


def _agg(taxon_id: int, name: str, common: str | None, count: int) -> OccurrenceAggregate:
    return OccurrenceAggregate(
        taxon=TaxonSummary(id=taxon_id, scientific_name=name, common_name=common),
        observation_count=count,
    )


class TestFilterAggregates:
    """Test the name filter."""

    def test_matches_common_or_scientific(self) -> None:
        aggregates = [
            _agg(1, "Turdus pelios", "African Thrush", 10),
            _agg(2, "Lantana camara", None, 8),
            _agg(3, "Pycnonotus barbatus", "Common Bulbul", 5),
        ]
        assert [a.taxon.id for a in species_counts.filter_aggregates(aggregates, "thrush")] == [1]
        assert [a.taxon.id for a in species_counts.filter_aggregates(aggregates, "LANTANA")] == [2]

    def test_preserves_order(self) -> None:
        aggregates = [_agg(1, "Aa", "x", 9), _agg(2, "Ab", "y", 4), _agg(3, "Ba", "z", 1)]
        filtered = species_counts.filter_aggregates(aggregates, "a")
        assert [a.taxon.id for a in filtered] == [1, 2, 3]

    def test_blank_term_keeps_all(self) -> None:
        aggregates = [_agg(1, "Aa", None, 1)]
        assert species_counts.filter_aggregates(aggregates, "  ") == aggregates
