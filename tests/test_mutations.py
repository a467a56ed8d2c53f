from augmentql import DomainModel, augment
from augmentql.model import Field, NodeType, ScalarTarget


def _types(gtype):
    return {name: str(f.type) for name, f in gtype.fields.items()}


def test_create_input_scalars(graph):
    fields = _types(graph["MovieCreateInput"])
    assert fields["id"] == "ID!"
    assert fields["title"] == "String"
    assert fields["tags"] == "[String!]"
    assert fields["genre"] == "Genre"
    assert fields["website"] == "Url"


def test_update_input_grouped_operators(lean_graph):
    fields = _types(lean_graph["MovieUpdateInput"])
    assert fields["runtime"] == "IntScalarMutations"
    assert fields["tags"] == "StringListMutations"
    assert fields["genre"] == "GenreEnumScalarMutations"
    assert lean_graph["IntScalarMutations"].field_names() == ["set", "add", "subtract"]
    assert lean_graph["StringScalarMutations"].field_names() == ["set"]
    assert _types(lean_graph["StringListMutations"]) == {"set": "[String!]", "push": "[String!]", "pop": "Int"}
    assert lean_graph["StringListMutations"].description == "Mutations for a list for String"


def test_float_mutations():
    model = DomainModel.of(NodeType("Product", (Field("price", ScalarTarget("Float")),)))
    graph = augment(model)
    assert graph["FloatScalarMutations"].field_names() == ["set", "add", "subtract", "multiply", "divide"]
    update = graph["ProductUpdateInput"]
    assert [n for n in update.field_names() if n.startswith("price_")] == [
        "price_SET", "price_ADD", "price_SUBTRACT", "price_MULTIPLY", "price_DIVIDE",
    ]


def test_legacy_mutation_aliases(graph):
    update = graph["MovieUpdateInput"]
    assert update["runtime_SET"].deprecation_reason == "Please use the generic mutation 'runtime: { set: ... } }' instead."
    assert update["runtime_INCREMENT"].deprecation_reason == (
        "Please use the relevant generic mutation 'runtime: { add: ... } }' instead."
    )
    assert str(update["runtime_DECREMENT"].type) == "Int"
    assert str(update["tags_PUSH"].type) == "[String!]"
    assert str(update["tags_POP"].type) == "Int"
    assert "title_INCREMENT" not in update
    assert "budget_INCREMENT" in update


def test_relationship_field_input_to_node(graph):
    create = graph["MovieCreateInput"]
    assert str(create["director"].type) == "MovieDirectorFieldInput"
    field_input = graph["MovieDirectorFieldInput"]
    # single relationship takes single values
    assert _types(field_input) == {
        "create": "MovieDirectorCreateFieldInput",
        "connect": "MovieDirectorConnectFieldInput",
    }
    assert _types(graph["MovieDirectorCreateFieldInput"]) == {"node": "DirectorCreateInput!"}
    assert _types(graph["MovieDirectorConnectFieldInput"]) == {"where": "DirectorConnectWhere"}
    assert _types(graph["DirectorConnectWhere"]) == {"node": "DirectorWhere!"}


def test_relationship_field_input_with_edge_properties(graph):
    field_input = graph["ActorMoviesFieldInput"]
    assert _types(field_input) == {
        "create": "[ActorMoviesCreateFieldInput!]",
        "connect": "[ActorMoviesConnectFieldInput!]",
    }
    assert _types(graph["ActorMoviesCreateFieldInput"]) == {"node": "MovieCreateInput!", "edge": "ActedInCreateInput"}


def test_interface_target_cannot_be_created(graph):
    assert graph["MovieActorsFieldInput"].field_names() == ["connect"]
    assert "MovieActorsCreateFieldInput" not in graph
    assert "PersonCreateInput" not in graph
    update = graph["MovieActorsUpdateFieldInput"]
    assert update.field_names() == ["connect", "disconnect", "delete"]


def test_update_field_input(graph):
    update = graph["MovieUpdateInput"]
    assert str(update["director"].type) == "[MovieDirectorUpdateFieldInput!]"
    field_update = graph["ActorMoviesUpdateFieldInput"]
    assert _types(field_update) == {
        "connect": "[ActorMoviesConnectFieldInput!]",
        "disconnect": "[ActorMoviesDisconnectFieldInput!]",
        "create": "[ActorMoviesCreateFieldInput!]",
        "delete": "[ActorMoviesDeleteFieldInput!]",
    }
    assert _types(graph["ActorMoviesDisconnectFieldInput"]) == {"where": "ActorMoviesConnectionWhere"}


def test_union_target_uses_per_member_containers(graph):
    create = graph["ActorCreateInput"]
    assert str(create["productions"].type) == "ActorProductionsUnionCreateInput"
    assert _types(graph["ActorProductionsUnionCreateInput"]) == {
        "Movie": "ActorProductionsMovieFieldInput",
        "Show": "ActorProductionsShowFieldInput",
    }
    assert _types(graph["ActorProductionsShowConnectFieldInput"]) == {"where": "ShowConnectWhere"}
    assert _types(graph["ActorProductionsUnionUpdateInput"]) == {
        "Movie": "[ActorProductionsMovieUpdateFieldInput!]",
        "Show": "[ActorProductionsShowUpdateFieldInput!]",
    }
    delete = graph["ActorProductionsShowDeleteFieldInput"]
    assert str(delete["where"].type) == "ActorProductionsShowConnectionWhere"


def test_mutation_root_fields(graph):
    mutation = graph["Mutation"]
    create = mutation["createMovies"]
    assert str(create.type) == "CreateMoviesMutationResponse!"
    assert str(create.args["input"].type) == "[MovieCreateInput!]!"
    update = mutation["updateMovies"]
    assert {n: str(a.type) for n, a in update.args.items()} == {"where": "MovieWhere", "update": "MovieUpdateInput"}
    assert str(mutation["deleteMovies"].type) == "DeleteInfo!"
    assert "createPeople" not in mutation
    assert "createProductions" not in mutation
    assert _types(graph["CreateMoviesMutationResponse"]) == {"info": "CreateInfo!", "movies": "[Movie!]!"}
    assert graph["DeleteInfo"].field_names() == ["nodesDeleted", "relationshipsDeleted"]
