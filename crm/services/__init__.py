"""Services Layer: application workflow and post-commit event dispatch.

Invariants:
    - Services own transaction scope; core functions never see a session
"""
