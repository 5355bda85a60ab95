"""Tests for category aggregation."""

import copy

from blog_explorer.core.aggregator import (
    BreadcrumbItem,
    aggregate,
    build_breadcrumbs,
    build_category_index,
    related_categories,
)
from blog_explorer.models.category import Category, DerivedCategory
from blog_explorer.models.post import Post
from blog_explorer.utils.text_utils import parse_timestamp


def _by_id(categories):
    return {category.id: category for category in categories}


class TestAggregate:
    def test_counts_and_membership(self, post_records, category_records):
        result = _by_id(aggregate(post_records, category_records))

        assert set(result) == {"c-web", "c-b2r", "c-ad", "c-kerb"}
        assert result["c-b2r"].count == 2
        assert [p.id for p in result["c-b2r"].posts] == ["p1", "p2"]
        assert [p.id for p in result["c-web"].posts] == ["p2"]
        assert [p.id for p in result["c-ad"].posts] == ["p3"]

    def test_count_matches_posts(self, post_records, category_records):
        for category in aggregate(post_records, category_records):
            assert category.count == len(category.posts)

    def test_preserves_category_order(self, post_records, category_records):
        result = aggregate(post_records, category_records)
        assert [c.id for c in result] == ["c-web", "c-b2r", "c-ad", "c-kerb"]

    def test_latest_post_at(self, post_records, category_records):
        result = _by_id(aggregate(post_records, category_records))
        assert result["c-b2r"].latest_post_at == parse_timestamp("2024-01-01T00:00:00Z")
        assert result["c-web"].latest_post_at == parse_timestamp("2023-06-01T00:00:00Z")
        assert result["c-ad"].latest_post_at == 0

    def test_summaries_carry_read_time(self, post_records, category_records):
        result = _by_id(aggregate(post_records, category_records))
        lame, sqli = result["c-b2r"].posts
        assert lame.read_time == 2
        assert sqli.read_time == 1
        assert result["c-ad"].posts[0].read_time is None

    def test_empty_categories_excluded(self, post_records, category_records):
        result = aggregate(post_records, category_records)
        assert "c-empty" not in {c.id for c in result}

    def test_unknown_category_reference_ignored(self, category_records):
        posts = [{"id": "px", "title": "Orphan", "categories": ["X"]}]
        result = aggregate(posts, category_records)
        assert result == []

    def test_post_without_categories(self, category_records):
        assert aggregate([{"id": "p", "categories": []}], category_records) == []
        assert aggregate([{"id": "p"}], category_records) == []

    def test_posts_sorted_newest_first_with_stable_ties(self):
        categories = [{"id": "c", "title": "C", "slug": "c"}]
        posts = [
            {"id": "undated", "categories": ["c"]},
            {"id": "old", "categories": ["c"], "publishedAt": "2023-06-01"},
            {"id": "tie-a", "categories": ["c"], "publishedAt": "2024-01-01"},
            {"id": "tie-b", "categories": ["c"], "createdAt": "2024-01-01"},
        ]
        (category,) = aggregate(posts, categories)
        assert [p.id for p in category.posts] == ["tie-a", "tie-b", "old", "undated"]

    def test_idempotent(self, post_records, category_records):
        first = [c.model_dump() for c in aggregate(post_records, category_records)]
        second = [c.model_dump() for c in aggregate(post_records, category_records)]
        assert first == second

    def test_does_not_mutate_inputs(self, post_records, category_records):
        posts_before = copy.deepcopy(post_records)
        categories_before = copy.deepcopy(category_records)
        aggregate(post_records, category_records)
        assert post_records == posts_before
        assert category_records == categories_before

    def test_accepts_models(self, post_records, category_records):
        posts = [Post.model_validate(p) for p in post_records]
        categories = [Category.model_validate(c) for c in category_records]
        result = aggregate(posts, categories)
        assert all(isinstance(c, DerivedCategory) for c in result)
        assert len(result) == 4

    def test_reaggregating_derived_categories_starts_fresh(self, post_records, category_records):
        derived = aggregate(post_records, category_records)
        again = _by_id(aggregate(post_records, derived))
        assert again["c-b2r"].count == 2

    def test_unreadable_records_skipped(self, category_records):
        posts = [{"title": "no id", "categories": ["c-web"]}, {"id": "ok", "categories": ["c-web"]}]
        (web,) = aggregate(posts, category_records)
        assert [p.id for p in web.posts] == ["ok"]


class TestCategoryIndex:
    def test_ranked_by_count_then_title(self, post_records, category_records):
        index = build_category_index(post_records, category_records)
        assert [item.slug for item in index.items] == [
            "boot2root",
            "active-directory",
            "kerberos",
            "web",
        ]
        assert index.items[0].count == 2

    def test_total_tagged(self, post_records, category_records):
        assert build_category_index(post_records, category_records).total_tagged == 5

    def test_title_falls_back_to_slug(self):
        index = build_category_index(
            [{"id": "p", "categories": ["c"]}],
            [{"id": "c", "slug": "misc"}],
        )
        assert index.items[0].title == "misc"


class TestBreadcrumbs:
    def test_current_already_present(self):
        crumbs = [
            {"label": "Boot2Root", "url": "/boot2root"},
            {"label": "Active Directory", "url": "/boot2root/active-directory"},
        ]
        assert build_breadcrumbs(crumbs, "active directory") == [
            BreadcrumbItem(label="Boot2Root", href="/categories/boot2root"),
            BreadcrumbItem(label="Active Directory", href=None),
        ]

    def test_current_appended(self):
        crumbs = [{"label": "Boot2Root", "url": "/boot2root"}, {"label": None, "url": "/x"}]
        assert build_breadcrumbs(crumbs, "Kerberos") == [
            BreadcrumbItem(label="Boot2Root", href="/categories/boot2root"),
            BreadcrumbItem(label="Kerberos"),
        ]

    def test_no_breadcrumbs(self):
        assert build_breadcrumbs(None, "Web") == [BreadcrumbItem(label="Web")]


class TestRelatedCategories:
    def test_siblings_share_parent(self, category_records):
        categories = [Category.model_validate(c) for c in category_records]
        ad = categories[2]
        related = related_categories(ad, categories)
        assert [c.id for c in related] == ["c-kerb"]

    def test_no_parent(self, category_records):
        web = Category.model_validate(category_records[0])
        assert related_categories(web, category_records) == []

    def test_limited_to_six(self):
        parent = {"id": "root"}
        categories = [{"id": f"c{i}", "slug": f"c{i}", "parent": parent} for i in range(10)]
        me = Category.model_validate(categories[0])
        related = related_categories(me, categories)
        assert [c.id for c in related] == ["c1", "c2", "c3", "c4", "c5", "c6"]
