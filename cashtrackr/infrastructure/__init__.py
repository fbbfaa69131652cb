"""Infrastructure Layer — persistence, credentials, email and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every external failure is mapped to a CashTrackrError before leaving this layer

Design Decisions:
    - Thin wrappers over bcrypt, PyJWT, smtplib and SQLAlchemy so services
      depend on small call surfaces that tests can replace
"""
