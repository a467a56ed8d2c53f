import pytest

from augmentql.naming import (
    EntityNames,
    PropertiesNames,
    RelationshipNames,
    camel_to_snake,
    lower_first,
    pluralize,
    upper_first,
)


@pytest.mark.parametrize(
    "value, expected",
    [("screenTime", "screen_time"), ("ActedIn", "acted_in"), ("HTTPServer", "http_server"), ("already_snake", "already_snake")],
)
def test_camel_to_snake(value, expected):
    assert camel_to_snake(value) == expected


def test_upper_first_keeps_the_rest_of_the_name():
    assert upper_first("actors") == "Actors"
    assert upper_first("acted_in") == "Acted_in"
    assert upper_first("someID") == "SomeID"
    assert upper_first("") == ""


def test_pluralize_and_lower_first():
    assert pluralize("Movie") == "Movies"
    assert pluralize("Person") == "People"
    assert lower_first("People") == "people"
    assert lower_first("") == ""


def test_entity_names():
    names = EntityNames("Movie")
    assert names.where == "MovieWhere"
    assert names.subscription_where == "MovieSubscriptionWhere"
    assert names.connection_type == "MoviesConnection"
    assert names.root_list == "movies"
    assert names.root_aggregate == "moviesAggregate"
    assert names.create_mutation == "createMovies"
    assert names.create_response == "CreateMoviesMutationResponse"
    assert names.updated_subscription == "movieUpdated"
    assert names.implementation_enum == "MovieImplementation"


def test_relationship_names_concatenate_owner_field_and_role():
    names = RelationshipNames("Movie", "actors", "Person")
    assert names.connection_filters == "MovieActorsConnectionFilters"
    assert names.connection_where == "MovieActorsConnectionWhere"
    assert names.connection_aggregation_input == "MovieActorsConnectionAggregationInput"
    assert names.node_aggregation_where_input == "MovieActorsNodeAggregationWhereInput"
    assert names.connection_field == "actorsConnection"
    assert names.aggregate_field == "actorsAggregate"


def test_selection_aggregate_encodes_target():
    names = RelationshipNames("Movie", "actors", "Person")
    assert names.selection_aggregate == "MoviePersonActorsAggregateSelection"
    assert names.node_aggregate_selection == "MoviePersonActorsNodeAggregateSelection"
    assert names.edge_aggregate_selection == "MoviePersonActorsEdgeAggregateSelection"


def test_member_names_extend_the_prefix():
    names = RelationshipNames("Actor", "productions", "Production").for_member("Show")
    assert names.connection_where == "ActorProductionsShowConnectionWhere"
    assert names.field_input == "ActorProductionsShowFieldInput"
    # the union containers themselves use the plain prefix
    plain = RelationshipNames("Actor", "productions", "Production")
    assert plain.union_create_input == "ActorProductionsUnionCreateInput"


def test_properties_names():
    names = PropertiesNames("ActedIn")
    assert names.where == "ActedInWhere"
    assert names.aggregation_where_input == "ActedInAggregationWhereInput"


def test_generated_names_are_unique(graph):
    names = graph.names()
    assert len(names) == len(set(names))


def test_field_part_is_only_capitalized():
    snake = RelationshipNames("Actor", "acted_in", "Movie")
    camel = RelationshipNames("Actor", "actedIn", "Movie")
    assert snake.connection_where == "ActorActed_inConnectionWhere"
    assert camel.connection_where == "ActorActedInConnectionWhere"
    assert snake.selection_aggregate == "ActorMovieActed_inAggregateSelection"
