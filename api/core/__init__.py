"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that several features use
(DB wiring, settings, logging, the Cloudinary client). Feature-specific SQL
and business logic stay in the feature package (e.g. `ads/`).
"""
