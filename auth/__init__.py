"""auth/ -- Authentication and authorization package for Bookshelf.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or books/.
api/ and books/ import from auth/, not the other way around.
"""
