import pytest

from wordstat.models.regions import RegionNode, RegionRow
from wordstat.services.enrichment import TOP_BY_AFFINITY, enrich, region_label
from wordstat.utils.regions_tree import flatten_tree


def _row(region_id: int, count: int, affinity: float = 100.0) -> RegionRow:
    return RegionRow(region_id=region_id, count=count, share=0.0, affinity_index=affinity)


def test_ranking_keeps_response_order_for_ties():
    rows = [_row(1, 5), _row(2, 50), _row(3, 50)]
    result = enrich(rows, [], {}, limit=2)
    assert [row.region_id for row in result.ranked] == [2, 3]
    assert result.matched == 3
    assert result.filtered is False


def test_filter_keeps_requested_subtree_only():
    forest = [
        RegionNode(
            id=1,
            label="root",
            children=[
                RegionNode(id=2, label="child", children=[RegionNode(id=3, label="grandchild")]),
                RegionNode(id=4, label="other child"),
            ],
        )
    ]
    rows = [_row(2, 10), _row(3, 20), _row(4, 30)]
    result = enrich(rows, forest, flatten_tree(forest), filter_ids=[2])
    assert sorted(row.region_id for row in result.ranked) == [2, 3]
    assert result.filtered is True
    assert result.matched == 2


def test_unknown_region_keeps_placeholder_name(forest, distribution_rows):
    result = enrich(distribution_rows, forest, flatten_tree(forest), limit=50)
    names = {row.region_id: row.region_name for row in result.ranked}
    assert names[999] == "Unknown (999)"
    assert names[213] == "Moscow"
    assert result.top_by_affinity[0].region_id == 999
    assert result.top_by_affinity[0].region_name == "Unknown (999)"


def test_unknown_filter_id_matches_itself(forest, distribution_rows):
    result = enrich(distribution_rows, forest, flatten_tree(forest), filter_ids=[999])
    assert [row.region_id for row in result.ranked] == [999]


def test_filter_on_country_expands_to_descendants(forest, distribution_rows):
    result = enrich(distribution_rows, forest, flatten_tree(forest), filter_ids=[225])
    assert [row.region_id for row in result.ranked] == [213, 2, 10174]


def test_empty_filter_means_no_filter(forest, distribution_rows):
    result = enrich(distribution_rows, forest, flatten_tree(forest), filter_ids=[])
    assert result.matched == len(distribution_rows)
    assert result.filtered is False


def test_affinity_view_is_independent_of_limit(forest, distribution_rows):
    result = enrich(distribution_rows, forest, flatten_tree(forest), limit=1)
    assert [row.region_id for row in result.ranked] == [213]
    assert [row.region_id for row in result.top_by_affinity] == [999, 2, 213, 149, 10174]
    assert len(result.top_by_affinity) == TOP_BY_AFFINITY


def test_affinity_view_capped_at_five():
    rows = [_row(index, index, affinity=float(index)) for index in range(1, 9)]
    result = enrich(rows, [], {}, limit=8)
    assert [row.region_id for row in result.top_by_affinity] == [8, 7, 6, 5, 4]
    assert len(result.ranked) == 8


def test_input_rows_are_not_mutated(distribution_rows):
    enrich(distribution_rows, [], {})
    assert all(row.region_name is None for row in distribution_rows)


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        enrich([], [], {}, limit=0)


def test_region_label_falls_back_on_missing_entry(forest):
    index = flatten_tree(forest)
    assert region_label(index, 2) == "Saint Petersburg"
    assert region_label(index, 31337) == "Unknown (31337)"
