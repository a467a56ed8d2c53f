import pytest

from augmentql import AugmentConfig, AugmentationError, DomainModel
from augmentql.core.classifier import DEFAULT_POLICY, FieldKind, FilterPolicy, classify, resolve_policy
from augmentql.core.scalars import ScalarKind
from augmentql.model import (
    EnumType,
    Field,
    FilterableAnnotation,
    InterfaceType,
    NodeType,
    ReferenceTarget,
    RelationshipMeta,
    RelationshipProperties,
    ScalarTarget,
    UnionType,
)


def _ref(name, target, filterable=None, properties=None, is_list=True):
    return Field(
        name,
        ReferenceTarget(target, RelationshipMeta("REL", properties=properties)),
        is_list=is_list,
        filterable=filterable,
    )


def _small_model(*extra):
    movie = NodeType("Movie", (Field("title", ScalarTarget("String")),))
    show = NodeType("Show", (Field("title", ScalarTarget("String")),))
    person = InterfaceType("Person", (Field("name", ScalarTarget("String")),), implementations=("Actor",))
    actor = NodeType("Actor", (Field("name", ScalarTarget("String")),))
    production = UnionType("Production", ("Movie", "Show"))
    return DomainModel.of(movie, show, person, actor, production, *extra)


def test_default_policy_is_by_value_only():
    assert DEFAULT_POLICY is FilterPolicy.BY_VALUE
    assert DEFAULT_POLICY.by_value and not DEFAULT_POLICY.by_aggregate


def test_missing_annotation_resolves_to_default():
    assert resolve_policy(None) is FilterPolicy.BY_VALUE


def test_empty_annotation_resolves_to_default():
    # presence of the annotation alone never enables aggregation
    assert resolve_policy(FilterableAnnotation()) is FilterPolicy.BY_VALUE


@pytest.mark.parametrize(
    "by_value, by_aggregate, expected",
    [
        (None, True, FilterPolicy.BY_VALUE_AND_AGGREGATE),
        (False, None, FilterPolicy.NONE),
        (False, True, FilterPolicy.BY_AGGREGATE),
        (True, False, FilterPolicy.BY_VALUE),
    ],
)
def test_explicit_arguments_override_per_argument(by_value, by_aggregate, expected):
    assert resolve_policy(FilterableAnnotation(by_value, by_aggregate)) is expected


def test_policy_without_aggregate_keeps_value_flag():
    assert FilterPolicy.BY_VALUE_AND_AGGREGATE.without_aggregate() is FilterPolicy.BY_VALUE
    assert FilterPolicy.BY_AGGREGATE.without_aggregate() is FilterPolicy.NONE


def test_scalar_field_classification():
    model = _small_model()
    movie = model.get("Movie")
    c = classify(movie.fields[0], movie, model)
    assert c.kind is FieldKind.SCALAR
    assert not c.kind.is_relationship
    assert c.scalar.kind is ScalarKind.STRING
    assert c.target is None


def test_relationship_target_kinds():
    model = _small_model()
    owner = NodeType("Studio", (
        _ref("movies", "Movie"),
        _ref("people", "Person"),
        _ref("productions", "Production"),
    ))
    kinds = [classify(f, owner, model).kind for f in owner.fields]
    assert kinds == [FieldKind.CONCRETE, FieldKind.INTERFACE, FieldKind.UNION]
    assert all(k.is_relationship for k in kinds)


def test_union_target_forces_aggregate_off():
    model = _small_model()
    f = _ref("productions", "Production", filterable=FilterableAnnotation(by_aggregate=True))
    c = classify(f, NodeType("Studio", (f,)), model)
    assert c.policy is FilterPolicy.BY_VALUE
    f = _ref("productions", "Production", filterable=FilterableAnnotation(by_value=False, by_aggregate=True))
    assert classify(f, NodeType("Studio", (f,)), model).policy is FilterPolicy.NONE


def test_enum_and_custom_scalars_resolve():
    model = _small_model(EnumType("Genre", ("ACTION",)))
    model.scalars = ("Url",)
    owner = NodeType("Movie", (Field("genre", ScalarTarget("Genre")), Field("site", ScalarTarget("Url"))))
    genre, site = (classify(f, owner, model) for f in owner.fields)
    assert genre.scalar.kind is ScalarKind.ENUM
    assert site.scalar.kind is ScalarKind.CUSTOM


def test_relationship_properties_attached():
    props = RelationshipProperties("ActedIn", (Field("screenTime", ScalarTarget("Int")),))
    model = _small_model(props)
    f = _ref("movies", "Movie", properties="ActedIn")
    c = classify(f, NodeType("Actor", (f,)), model)
    assert c.properties is props


def test_unknown_relationship_target_raises():
    model = _small_model()
    f = _ref("awards", "Award")
    with pytest.raises(AugmentationError) as exc:
        classify(f, NodeType("Movie", (f,)), model)
    assert exc.value.type_name == "Movie"
    assert exc.value.field_name == "awards"
    assert "Award" in str(exc.value)


def test_scalar_relationship_target_raises():
    model = _small_model()
    f = _ref("score", "Int")
    with pytest.raises(AugmentationError, match="is a scalar type"):
        classify(f, NodeType("Movie", (f,)), model)


def test_unknown_scalar_raises():
    model = _small_model()
    f = Field("rating", ScalarTarget("Stars"))
    with pytest.raises(AugmentationError, match="unknown scalar type 'Stars'"):
        classify(f, NodeType("Movie", (f,)), model)


def test_domain_type_used_as_scalar_raises():
    model = _small_model()
    f = Field("sequel", ScalarTarget("Movie"))
    with pytest.raises(AugmentationError, match="declare the field as a relationship"):
        classify(f, NodeType("Movie", (f,)), model)


def test_missing_properties_type_raises():
    model = _small_model()
    f = _ref("movies", "Movie", properties="Missing")
    with pytest.raises(AugmentationError, match="properties type 'Missing'"):
        classify(f, NodeType("Actor", (f,)), model)


def test_aggregation_over_boolean_raises():
    model = _small_model()
    f = Field("active", ScalarTarget("Boolean"), filterable=FilterableAnnotation(by_aggregate=True))
    with pytest.raises(AugmentationError, match="non-aggregatable scalar kind 'Boolean'"):
        classify(f, NodeType("Actor", (f,)), model)


def test_aggregation_over_list_raises():
    model = _small_model()
    f = Field("scores", ScalarTarget("Int"), is_list=True, filterable=FilterableAnnotation(by_aggregate=True))
    with pytest.raises(AugmentationError, match="list fields cannot be aggregated"):
        classify(f, NodeType("Movie", (f,)), model)


def test_aggregatable_kinds_are_configurable():
    model = _small_model()
    f = Field("active", ScalarTarget("Boolean"), filterable=FilterableAnnotation(by_aggregate=True))
    config = AugmentConfig(aggregatable_kinds=frozenset({"Boolean"}))
    c = classify(f, NodeType("Actor", (f,)), model, config)
    assert c.aggregatable
    f = Field("title", ScalarTarget("String"), filterable=FilterableAnnotation(by_aggregate=True))
    with pytest.raises(AugmentationError):
        classify(f, NodeType("Movie", (f,)), model, config)


def test_relationship_on_properties_type_raises():
    model = _small_model()
    props = RelationshipProperties("ActedIn", (_ref("movie", "Movie"),))
    with pytest.raises(AugmentationError, match="only declare scalar fields"):
        classify(props.fields[0], props, model)
