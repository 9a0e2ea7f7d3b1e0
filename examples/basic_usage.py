#!/usr/bin/env python3
"""
Demonstration of the HyperGraphQL core.

This example builds a small team graph, queries it with filters, navigates
it, and then compresses and projects the organization hypergraph.

Run with:
    python examples/basic_usage.py
"""

from hypergraphql import HyperGraphManager
from hypergraphql.graph import (
    GraphNavigator,
    OrganizationContext,
    RecordFilter,
    ScalingConfig,
    get_projection_content,
)

ORG = "example-org"


def demo_create_and_query(manager):
    """Create entities and relations, then list them."""
    print("=" * 70)
    print("Demo 1: Create and Query Entities")
    print("=" * 70)

    alice = manager.create_entity(
        "Developer",
        {"name": "Alice Johnson", "role": "Senior Engineer", "repository": "api"},
        organization=ORG,
    )
    bob = manager.create_entity(
        "Developer",
        {"name": "Bob Smith", "role": "Engineer", "repository": "web"},
        organization=ORG,
    )
    project = manager.create_entity(
        "Project",
        {"name": "HyperGraphQL", "status": "active", "repository": "api"},
        organization=ORG,
    )
    manager.create_relation("WorksOn", alice.id, project.id, {"hoursPerWeek": 40}, organization=ORG)
    manager.create_relation("WorksOn", bob.id, project.id, {"hoursPerWeek": 20}, organization=ORG)
    manager.create_relation("Reviews", alice.id, bob.id, organization=ORG)

    developers = manager.list_entities(RecordFilter(organization=ORG, type="Developer"))
    print(f"\nFound {len(developers)} developers")

    seniors = manager.list_entities(
        RecordFilter(organization=ORG, attribute_equals={"role": "Senior Engineer"})
    )
    print(f"Found {len(seniors)} senior engineers")
    return alice


def demo_navigate(manager, start_id):
    """Navigate outward from a developer."""
    print("\n" + "=" * 70)
    print("Demo 2: Navigate Hypergraph")
    print("=" * 70)

    navigator = (GraphNavigator(manager.repository)
                 .starting_from(start_id)
                 .max_depth(2)
                 .follow("WorksOn", "Reviews"))
    print()
    print(navigator.explain())

    subgraph = navigator.run()
    print(f"\nFound {len(subgraph.entities)} connected entities")
    print(f"Found {len(subgraph.relations)} relationships")
    for entity in subgraph.entities:
        print(f"  - {entity.type}: {entity.attributes.get('name', entity.id)}")


def demo_org_operations(manager):
    """Snapshot, compress and project the organization."""
    print("\n" + "=" * 70)
    print("Demo 3: Organization Operations")
    print("=" * 70)

    hypergraph = manager.get_hypergraph(ORG)
    print("\nOrganization Hypergraph:")
    print(f"  Entities: {len(hypergraph.entities)}")
    print(f"  Relations: {len(hypergraph.relations)}")
    print(f"  Last Sync: {hypergraph.metadata.to_dict()['lastSync']}")

    org = manager.get_organization(ORG)
    print(f"  Repositories: {', '.join(org.repos)}")

    compressed = manager.scale(hypergraph, ScalingConfig("compress", "folder"), org)
    print(f"\nCompressed to version {compressed.metadata.version}:")
    for entity in compressed.entities:
        print(f"  - {entity.id}: {entity.attributes['count']} members")

    projections = manager.projections(OrganizationContext(org_id=ORG, org_name=ORG))
    print(f"\n{len(projections)} projections, first at {projections[0].path}:")
    print(get_projection_content(projections[0]))


def main():
    manager = HyperGraphManager()
    alice = demo_create_and_query(manager)
    demo_navigate(manager, alice.id)
    demo_org_operations(manager)


if __name__ == "__main__":
    main()
