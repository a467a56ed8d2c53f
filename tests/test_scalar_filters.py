from augmentql.builders.scalar_filters import SORT_DIRECTION
from augmentql.graph import TypeKind


def test_grouped_filter_field_per_scalar(graph):
    where = graph["MovieWhere"]
    assert str(where["id"].type) == "IDScalarFilters"
    assert str(where["runtime"].type) == "IntScalarFilters"
    assert str(where["released"].type) == "DateTimeScalarFilters"
    assert str(where["genre"].type) == "GenreEnumScalarFilters"
    assert str(where["website"].type) == "UrlScalarFilters"
    assert str(where["tags"].type) == "StringListFilters"


def test_operator_sets_follow_scalar_kind(graph):
    assert graph["StringScalarFilters"].field_names() == ["eq", "in", "contains", "startsWith", "endsWith"]
    assert graph["IntScalarFilters"].field_names() == ["eq", "in", "lt", "lte", "gt", "gte"]
    assert graph["DateTimeScalarFilters"].field_names() == ["eq", "in", "lt", "lte", "gt", "gte"]
    assert graph["GenreEnumScalarFilters"].field_names() == ["eq", "in"]
    assert graph["StringListFilters"].field_names() == ["eq", "includes"]
    assert str(graph["IntScalarFilters"]["in"].type) == "[Int!]"
    assert str(graph["StringListFilters"]["eq"].type) == "[String!]"


def test_boolean_filters_only_equality(graph):
    assert graph["DirectorWhere"]["active"].type.name == "BooleanScalarFilters"
    assert graph["BooleanScalarFilters"].field_names() == ["eq"]


def test_legacy_aliases_mirror_grouped_operators(graph):
    where = graph["MovieWhere"]
    for suffix in ("EQ", "IN", "LT", "LTE", "GT", "GTE"):
        alias = where[f"runtime_{suffix}"]
        assert alias.is_deprecated
    assert str(where["runtime_IN"].type) == "[Int!]"
    assert where["runtime_GT"].deprecation_reason == "Please use the relevant generic filter runtime: { gt: ... }"
    assert str(where["tags_INCLUDES"].type) == "String"
    assert str(where["tags_EQ"].type) == "[String!]"
    assert "genre_CONTAINS" not in where


def test_legacy_aliases_can_be_disabled(lean_graph):
    where = lean_graph["MovieWhere"]
    assert "runtime" in where
    assert not any(f.is_deprecated for f in where.fields.values())


def test_by_value_false_removes_field_and_aliases(graph):
    where = graph["MovieWhere"]
    assert "title" not in where
    assert not [name for name in where.field_names() if name.startswith("title_")]


def test_filter_types_are_shared(graph):
    # Director.name and Person.name both point at the same filters type
    assert graph["DirectorWhere"]["name"].type.name == graph["PersonWhere"]["name"].type.name == "StringScalarFilters"


def test_sort_ignores_filter_policy(graph):
    sort = graph["MovieSort"]
    assert sort.field_names() == ["id", "title", "runtime", "released", "budget", "genre"]
    assert all(f.type.name == SORT_DIRECTION for f in sort.fields.values())
    assert graph[SORT_DIRECTION].kind is TypeKind.ENUM
    assert graph[SORT_DIRECTION].values == ["ASC", "DESC"]


def test_sort_skips_lists_and_unsortable_fields(graph):
    sort = graph["MovieSort"]
    assert "tags" not in sort
    assert "website" not in sort


def test_extended_scalars_are_declared_when_used(graph):
    assert graph["DateTime"].kind is TypeKind.SCALAR
    assert graph["BigInt"].kind is TypeKind.SCALAR
    assert graph["Url"].kind is TypeKind.SCALAR
    assert "Duration" not in graph
