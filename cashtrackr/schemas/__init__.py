"""Schemas — request rule sets and pydantic request/response models.

Invariants:
    - Raw request bodies pass their rule chains (core/input_rules.py) before a
      pydantic input model is built from them
    - Response models read plain records (from_attributes)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
