"""
Services Layer

Business logic for the tournament hub:
- Pure engines (coach grouping, rooming board, tournament buckets) take
  lists of records and return view structures; they never touch the session.
- Session-bound operations (imports, room assignment, finance sync, merges,
  cascade deletes) issue sequential single-record writes. There is no
  cross-record transaction: a failure part way through leaves earlier
  writes in place.
- Nothing here depends on HTTP request/response objects.
"""
