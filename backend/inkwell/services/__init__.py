"""
Inkwell Backend: Services Layer
================================

What:  Business rules sitting between routes (HTTP) and repositories (SQL).

Service Inventory:
    - PostService: ownership checks, update/delete/like rules for posts
    - AuthService: registration, login and profile lookup
"""
