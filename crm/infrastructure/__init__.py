"""Infrastructure Layer: database engine, transactions, logging, outbound collaborators.

Invariants:
    - Infrastructure may import core; core never imports infrastructure
"""
