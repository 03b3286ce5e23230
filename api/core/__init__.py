"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (settings, DB
wiring, schema setup, sample data, the response envelope). Keep entity SQL
and routes in the corresponding feature package (e.g. `tutors/`).
"""
