"""Services Layer — stateful stores, the coordination engine, and the sweeper.

Invariants:
    - Every store owns its lock(s); state is mutated only through store methods
    - Rules are delegated to core/; services only resolve inputs and serialize

Design Decisions:
    - One store per concern (actions, tokens, viewers, lounges) behind one engine facade
"""
