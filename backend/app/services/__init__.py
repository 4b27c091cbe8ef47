"""
Services Layer

Draw generation and rating logic:
- Accept plain inputs (rated players, registrations, Match rows)
- Return Match rows / rating updates without committing
- Do NOT depend on HTTP request/response objects
- Persist only through a RatingStore passed in by the caller
"""
