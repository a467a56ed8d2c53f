from enum import Enum

import pytest

from augmentql import AugmentSchema, AugmentType, AugmentationError, field, filterable, relation
from augmentql.core.fields import FieldDescriptor
from augmentql.model import Direction, InterfaceType, NodeType, ReferenceTarget, ScalarTarget, UnionType


def test_model_collects_declared_types(model):
    assert list(model.types) == ["Person", "Actor", "Director", "Movie", "Show", "Production"]
    assert isinstance(model.get("Person"), InterfaceType)
    assert isinstance(model.get("Movie"), NodeType)
    assert isinstance(model.get("Production"), UnionType)
    assert model.get("Production").members == ("Movie", "Show")
    assert list(model.relationship_properties) == ["ActedIn"]
    assert model.scalars == ("Url",)


def test_interface_implementations_from_base_class_and_argument(model):
    assert model.get("Person").implementations == ("Actor", "Director")
    assert [i.name for i in model.interfaces_of("Actor")] == ["Person"]


def test_inherited_fields_come_first(model):
    assert [f.name for f in model.get("Actor").fields] == ["name", "born", "movies", "productions"]


def test_scalar_field_declaration(model):
    movie = model.get("Movie")
    title = movie.get_field("title")
    assert title.target == ScalarTarget("String")
    assert title.filterable.by_value is False
    assert title.filterable.by_aggregate is True
    assert movie.get_field("id").is_required
    assert movie.get_field("tags").is_list
    assert movie.get_field("website").sortable is False
    assert movie.get_field("genre").type_name == "Genre"


def test_relation_declaration(model):
    actors = model.get("Movie").get_field("actors")
    assert isinstance(actors.target, ReferenceTarget)
    assert actors.target.target == "Person"
    assert actors.target.relationship.edge_label == "ACTED_IN"
    assert actors.target.relationship.direction is Direction.IN
    assert actors.target.relationship.properties == "ActedIn"
    assert actors.is_list
    director = model.get("Movie").get_field("director")
    assert not director.is_list


def test_edge_label_defaults_to_upper_snake_case():
    schema = AugmentSchema()

    @schema.node()
    class Studio(AugmentType):
        name = field('String')
        bigReleases = relation('Studio')

    rel = schema.model().get("Studio").get_field("bigReleases").target.relationship
    assert rel.edge_label == "BIG_RELEASES"
    assert rel.direction is Direction.OUT


def test_enum_registration_by_name_and_class(model):
    assert model.enums["Genre"].values == ("ACTION", "DRAMA", "COMEDY")
    schema = AugmentSchema()
    schema.enum("Status", ["ACTIVE", "RETIRED"], description="Lifecycle")
    assert schema.enums["Status"].description == "Lifecycle"
    with pytest.raises(ValueError, match="has no values"):
        schema.enum("Empty", [])


def test_python_enum_class_is_returned_unchanged():
    schema = AugmentSchema()

    class Color(Enum):
        RED = 1

    assert schema.enum(Color) is Color
    assert schema.enums["Color"].values == ("RED",)


def test_duplicate_registration_raises():
    schema = AugmentSchema()

    @schema.node()
    class Movie(AugmentType):
        title = field('String')

    with pytest.raises(ValueError, match="already registered"):
        schema.union("Movie", ["Movie"])
    with pytest.raises(ValueError, match="already registered"):
        schema.register(Movie, 'node')


def test_register_requires_augment_type():
    schema = AugmentSchema()
    with pytest.raises(TypeError, match="must subclass AugmentType"):
        @schema.node()
        class Plain:
            pass


def test_unknown_interface_raises():
    schema = AugmentSchema()

    @schema.node(implements=['Missing'])
    class Movie(AugmentType):
        title = field('String')

    with pytest.raises(AugmentationError, match="unknown interface 'Missing'"):
        schema.model()


def test_custom_type_name_and_description():
    schema = AugmentSchema()

    @schema.node(name='Film')
    class FilmNode(AugmentType):
        """Docstring description"""
        title = field('String')

    film = schema.model().get("Film")
    assert film.description == "Docstring description"
    assert film.fields[0].name == "title"


def test_descriptor_requires_attribute_name():
    with pytest.raises(ValueError, match="has no attribute name"):
        FieldDescriptor(kind='scalar', type='String').build('Movie')


def test_filterable_defaults_to_none():
    annotation = filterable()
    assert annotation.by_value is None
    assert annotation.by_aggregate is None


def test_augment_end_to_end():
    schema = AugmentSchema()

    @schema.node()
    class Book(AugmentType):
        title = field('String', required=True)
        pages = field('Int', filterable=filterable(by_aggregate=True))
        author = relation('Author', single=True)

    @schema.node()
    class Author(AugmentType):
        name = field('String')
        books = relation(Book, filterable=filterable(by_aggregate=True))

    graph = schema.augment()
    assert "pages" in graph["AuthorBooksNodeAggregationWhereInput"]
    assert "BookAuthorConnectionFilters" in graph
    assert str(graph["Book"]["author"].type) == "Author"
