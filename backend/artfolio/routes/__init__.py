# Routes package init
"""
Artfolio Backend — API Routes Package
======================================

Route Inventory:
    - auth.py:        POST /auth/register, POST /auth/login, GET /auth/validate
    - users.py:       /user/profile, /user/profile-image, /user/artists/all,
                      /user/saved-artists, /user/save-artist/{id}, /user/{id}
    - artworks.py:    /artworks, /artworks/{id}, /artworks/artist/{user_id}
    - categories.py:  /categories, /categories/{id}
    - enquiries.py:   /enquiries, /enquiries/{id}, /enquiries/{id}/status
    - media.py:       GET /uploads/{path}
    - health.py:      GET /, GET /health

Routes are thin: they pull data out of the request, resolve the caller's
Identity through dependencies.py, call one service method and return its
model. Status codes for failures come from the exception handlers in main.py.
"""
