#!/usr/bin/env python3
"""Demonstration of a generated typed client.

This script shows how to:
1. Parse a GraphQL schema
2. Generate a client module
3. Build a query and read a response

Note: This demo doesn't make real API calls - it answers the query with a
canned response through an in-memory transport.
"""

import asyncio
import importlib
import sys
import tempfile
from pathlib import Path

from gql_typed.core import CodeGenerator, parse_file
from gql_typed.runtime import Client

SCHEMA_PATH = Path(__file__).with_name("starwars.graphql")

CANNED_DATA = {
    "hero": {
        "name": "Luke Skywalker",
        "isDroid": False,
        "friends": [{"name": "Han Solo"}, {"name": "R2-D2"}],
    },
}


class CannedTransport:
    """Answers every query with CANNED_DATA."""

    async def execute(self, document, variables=None, operation_name=None):
        print("   Sent:")
        for line in document.splitlines():
            print(f"     {line}")
        return CANNED_DATA

    async def close(self):
        pass


async def run(sw):
    friends = sw.CharacterSelection.empty().select(sw.Character.name)
    hero = (
        sw.CharacterSelection.empty()
        .select(sw.Character.name)
        .select(sw.Character.isDroid)
        .select(sw.Character.friends, friends)
    )
    query = sw.QuerySelection.empty().select(sw.Query.hero, hero)

    async with Client(CannedTransport()) as client:
        response = await client.send(query.request("HeroWithFriends"))

    found = response.hero
    if found is None:
        print("   No hero")
        return
    print(f"   Hero: {found.name} (droid: {found.isDroid})")
    for friend in found.friends or []:
        if friend is not None:
            print(f"     friend: {friend.name}")
    # found.age would be rejected by mypy: age is not part of the selection


def main():
    print("=== Typed GraphQL Client Demo ===\n")

    print("1. Parsing GraphQL schema...")
    model = parse_file(SCHEMA_PATH)
    print(f"   {len(model.types)} types, root query type {model.query_type}")

    with tempfile.TemporaryDirectory() as tmpdir:
        print("\n2. Generating typed client code...")
        output = CodeGenerator(model).write(Path(tmpdir) / "starwars_client.py")
        code = output.read_text()
        print(f"   Generated {len(code.splitlines())} lines of client code")
        print(f"   {code.count('@_t.overload')} select overloads")

        sys.path.insert(0, tmpdir)
        try:
            sw = importlib.import_module("starwars_client")
            print("\n3. Sending a query...")
            asyncio.run(run(sw))
        finally:
            sys.path.remove(tmpdir)

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
