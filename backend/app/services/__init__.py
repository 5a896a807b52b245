"""
Services Layer

Scheduling and standings logic:
- Accept domain inputs (tournament/game IDs, sessions, team ids)
- Return domain outputs (fixtures, standings rows, models)
- Do NOT depend on HTTP request/response objects
- Signal bad input with InvalidArgumentError, anything else with InternalError
"""
