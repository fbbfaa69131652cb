"""Services Layer — orchestrates repositories, credentials and mail around pure core logic.

Invariants:
    - Services raise CashTrackrError subclasses; routes never build error responses
    - Services never import FastAPI

Design Decisions:
    - Constructor injection of repositories and collaborators: services are testable without HTTP
"""
