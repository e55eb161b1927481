"""
Blog API — Pydantic Request/Response Schemas
=============================================

Input schemas validate request bodies after the required-field scan.
Response schemas are the serialization layer: they define exactly which
fields leave the service, and build themselves from ORM objects through
their `from_model` constructors.
"""
