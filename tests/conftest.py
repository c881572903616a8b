"""Shared fixtures for the resolver tests."""

import copy
from collections.abc import Callable
from typing import Any

import pytest

from python_oas_generator.constants import REF_PREFIX
from python_oas_generator.parser.schema_graph import SchemaGraph


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"{REF_PREFIX}{name}"}


_PET_ID_PARAMETER = {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}}

PETSTORE_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {
        "/pets/{petId}": {
            "parameters": [_PET_ID_PARAMETER],
            "get": {
                "operationId": "getPet",
                "summary": "Find a pet by id",
                "tags": ["pets"],
                "parameters": [{"$ref": "#/components/parameters/Verbose"}],
                "responses": {
                    "200": {"description": "The pet", "content": {"application/json": {"schema": _ref("Pet")}}},
                    "404": {"description": "Pet not found"},
                },
            },
        },
        "/pets/{petId}/status": {
            "parameters": [_PET_ID_PARAMETER],
            "put": {
                "operationId": "updatePetStatus",
                "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("Status")}}},
                "responses": {
                    "200": {
                        "description": "Current weight",
                        "content": {"application/json": {"schema": _ref("Weight")}},
                    },
                },
            },
        },
        "/pets": {
            "post": {
                "operationId": "createPet",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "required": ["name"],
                                "properties": {"name": {"type": "string"}, "weight": _ref("Weight")},
                            }
                        }
                    }
                },
                "responses": {
                    "201": {
                        "description": "Created",
                        "content": {
                            "application/json": {
                                "schema": {"type": "object", "properties": {"id": {"type": "integer"}}}
                            }
                        },
                    }
                },
            },
            "get": {"summary": "Listed without an operationId", "responses": {"200": {"description": "ok"}}},
        },
    },
    "components": {
        "parameters": {"Verbose": {"name": "verbose", "in": "query", "schema": {"type": "boolean"}}},
        "schemas": {
            "Status": {"type": "string", "enum": ["available", "pending"]},
            "Weight": {"type": "number", "minimum": 0},
            "Tag": {"type": "object", "properties": {"name": {"type": "string"}}},
            "Pet": {
                "type": "object",
                "required": ["name", "status"],
                "properties": {
                    "name": {"type": "string"},
                    "status": _ref("Status"),
                    "weight": _ref("Weight"),
                    "tags": {"type": "array", "items": _ref("Tag")},
                    "category": {"type": "object", "properties": {"id": {"type": "integer"}}},
                    "born": {"type": "string", "format": "date", "default": "2020-01-01"},
                },
            },
            "PetList": {"type": "array", "items": _ref("Pet")},
            "Nickname": {"type": "string"},
        },
    },
}


@pytest.fixture
def petstore_spec() -> dict[str, Any]:
    """A small petstore document exercising wrappers, hoisting and rewriting."""
    return copy.deepcopy(PETSTORE_SPEC)


@pytest.fixture
def ref() -> Callable[[str], dict[str, str]]:
    """Build a ``$ref`` to a component schema."""
    return _ref


@pytest.fixture
def build_graph() -> Callable[[dict[str, Any]], SchemaGraph]:
    """Build a schema graph from raw component schemas."""
    return SchemaGraph.from_dict
