# Services package init
"""
Artfolio Backend — Services Layer
==================================

What:  Business logic between the routes (HTTP) and the database (persistence).
How:   Stateless service classes with module-level singletons. Each method
       takes the request's AsyncSession explicitly and, where access rules
       apply, the caller's Identity.

Service Inventory:
    - AuthService: registration, login, token issue/verify, identity lookup
    - UserService: own profile, profile image, artist directory, saved artists
    - ArtworkService: artwork CRUD, ownership checks, pagination
    - CategoryService: category registry
    - EnquiryService: enquiries and their status workflow
    - MediaService: image validation, storage, thumbnails, cleanup

Services never build HTTP responses. They return Pydantic models or raise
ArtfolioError subclasses, which main.py maps to status codes.
"""
