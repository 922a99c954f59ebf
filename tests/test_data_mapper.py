"""Unit tests for DataMapper."""

import pytest

from data_mapper import DataMapper, chunked
from exceptions import DuplicateCategoryNameError, ReferenceIntegrityError

SOURCE_CATEGORIES = [
    {"category_id": 1, "name": "A", "sort_order": 0, "tree_id": 1, "parent_id": 0},
    {"category_id": 2, "name": "B", "sort_order": 1, "tree_id": 1, "parent_id": 0},
]


class TestBuildCategoriesForNewTree:
    def test_projects_name_and_sort_order(self):
        result = DataMapper.build_categories_for_new_tree(SOURCE_CATEGORIES, 99)

        assert result == [
            {"name": "A", "sort_order": 0, "tree_id": 99},
            {"name": "B", "sort_order": 1, "tree_id": 99},
        ]

    def test_drops_category_id(self):
        result = DataMapper.build_categories_for_new_tree(SOURCE_CATEGORIES, 99)

        assert all("category_id" not in category for category in result)
        assert len(result) == len(SOURCE_CATEGORIES)

    def test_empty(self):
        assert DataMapper.build_categories_for_new_tree([], 99) == []


class TestCategoryMaps:
    def test_name_map(self):
        assert DataMapper.build_category_name_map(SOURCE_CATEGORIES) == {1: "A", 2: "B"}

    def test_created_map(self):
        created = [{"category_id": 10, "name": "A"}, {"category_id": 11, "name": "B"}]

        assert DataMapper.build_created_category_map(created) == {"A": 10, "B": 11}

    def test_duplicate_source_names_rejected(self):
        categories = [{"category_id": 1, "name": "Sale"}, {"category_id": 8, "name": "Sale"}]

        with pytest.raises(DuplicateCategoryNameError, match="'Sale'.* 1 and 8"):
            DataMapper.build_category_name_map(categories)

    def test_duplicate_created_names_rejected(self):
        created = [{"category_id": 10, "name": "Sale"}, {"category_id": 12, "name": "Sale"}]

        with pytest.raises(DuplicateCategoryNameError):
            DataMapper.build_created_category_map(created)


class TestProductCategoryAssignments:
    def test_remaps_through_name(self):
        result = DataMapper.build_product_category_assignments_for_new_categories(
            [{"product_id": 100, "category_id": 5}], {5: "Shoes"}, {"Shoes": 42}
        )

        assert result == [{"product_id": 100, "category_id": 42}]

    def test_unknown_category_id(self):
        with pytest.raises(ReferenceIntegrityError, match="999"):
            DataMapper.build_product_category_assignments_for_new_categories(
                [{"product_id": 100, "category_id": 5}, {"product_id": 100, "category_id": 999}],
                {5: "Shoes"},
                {"Shoes": 42},
            )

    def test_unknown_name(self):
        with pytest.raises(ReferenceIntegrityError, match="Shoes"):
            DataMapper.build_product_category_assignments_for_new_categories(
                [{"product_id": 100, "category_id": 5}], {5: "Shoes"}, {"Boots": 42}
            )

    def test_end_to_end_scenario(self):
        created = [
            {"category_id": 10, "name": "A", "sort_order": 0},
            {"category_id": 11, "name": "B", "sort_order": 1},
        ]

        result = DataMapper.build_product_category_assignments_for_new_categories(
            [{"product_id": 7, "category_id": 2}],
            DataMapper.build_category_name_map(SOURCE_CATEGORIES),
            DataMapper.build_created_category_map(created),
        )

        assert result == [{"product_id": 7, "category_id": 11}]


class TestProductChannelAssignments:
    def test_rewrites_every_channel_once_per_product(self):
        assignments = [
            {"product_id": 1, "channel_id": 1},
            {"product_id": 2, "channel_id": 3},
            {"product_id": 1, "channel_id": 8},
        ]

        result = DataMapper.build_product_channel_assignments_for_new_channel(assignments, 5)

        assert result == [
            {"product_id": 1, "channel_id": 5},
            {"product_id": 2, "channel_id": 5},
        ]


def test_chunked():
    assert chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert chunked([], 2) == []


def test_channel_rewrite_keeps_product_order():
    assignments = [
        {"product_id": 3, "channel_id": 1},
        {"product_id": 1, "channel_id": 1},
        {"product_id": 3, "channel_id": 2},
    ]

    result = DataMapper.build_product_channel_assignments_for_new_channel(assignments, 9)

    assert [a["product_id"] for a in result] == [3, 1]
    assert all(a["channel_id"] == 9 for a in result)
