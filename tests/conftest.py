"""Shared fixtures for the gql-typed test suite."""

import importlib
import sys

import pytest

from gql_typed.core.generator import generate
from gql_typed.core.parser import parse

CHARACTER_SDL = "type Character { name: String age: Int }"

STARWARS_SDL = '''
"""Entry point of every query."""
type Query {
  hero: Character
  characters: [Character!]!
  film: Film
}

"A person or droid in the saga."
type Character {
  id: ID!
  name: String
  age: Int
  height: Float
  isDroid: Boolean!
  friends: [Character]
  appearsIn: [Film!]
}

type Film {
  title: String!
  episode: Int
  characters: [Character!]!
  ratings: [[Float!]]
}
'''


@pytest.fixture
def starwars_model():
    return parse(STARWARS_SDL, "starwars.graphql")


@pytest.fixture
def character_model():
    return parse(CHARACTER_SDL, "character.graphql")


@pytest.fixture
def load_generated(tmp_path, monkeypatch):
    """Write generated source into tmp_path and import it as a module."""

    def _load(source: str, name: str = "generated_client"):
        (tmp_path / f"{name}.py").write_text(source, encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path))
        monkeypatch.delitem(sys.modules, name, raising=False)
        importlib.invalidate_caches()
        return importlib.import_module(name)

    return _load


@pytest.fixture
def starwars(starwars_model, load_generated):
    """The generated Star Wars client module."""
    return load_generated(generate(starwars_model), "starwars_client")


@pytest.fixture
def starwars_sdl():
    return STARWARS_SDL


@pytest.fixture
def character_sdl():
    return CHARACTER_SDL
