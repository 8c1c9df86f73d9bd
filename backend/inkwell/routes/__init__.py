"""
Inkwell Backend: API Routes Package
====================================

Route Inventory:
    - posts.py:   /posts/create, /posts/all, /posts/{id}, /posts/like/{id}
    - auth.py:    /auth/register, /auth/login, /auth/me
    - health.py:  GET /, GET /health

Routes are THIN: they extract data from the request, call a service, and
return its result. Error status codes come from the exception handlers
registered in main.py.
"""
