"""
Basic example of deriving a GraphQL API surface with augmentql.

This example demonstrates:
- Declaring node, interface and union types with the class DSL
- Tuning filter generation per field with ``filterable``
- Turning off deprecated alias fields through feature settings
- Exporting the derived schema as SDL via Strawberry
"""

import logging
import sys

from augmentql import AugmentConfig, AugmentSchema, AugmentType, field, filterable, relation

schema = AugmentSchema()


@schema.interface()
class Person(AugmentType):
    """Anyone credited on a film"""
    name = field('String', required=True, filterable=filterable(by_aggregate=True))
    born = field('Int')


@schema.relationship_properties()
class ActedIn(AugmentType):
    roles = field('String', list=True)


@schema.node()
class Actor(Person):
    movies = relation('Movie', type='ACTED_IN', properties='ActedIn')


@schema.node()
class Movie(AugmentType):
    """A feature film"""
    id = field('ID', required=True)
    title = field('String', required=True, filterable=filterable(by_aggregate=True))
    runtime = field('Int', filterable=filterable(by_aggregate=True))
    released = field('Date')
    actors = relation(Person, type='ACTED_IN', direction='IN', properties='ActedIn')


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    config = AugmentConfig.from_features({
        "excludeDeprecatedFields": {
            "attributeFilters": True,
            "aggregationFilters": True,
            "relationshipFilters": True,
            "mutationOperations": True,
        },
    })
    print(schema.to_strawberry(config).as_str())


if __name__ == "__main__":
    main()
