"""
Blog API — API Routes Package
==============================

Route Inventory:
    - posts.py:    GET/POST /blog-posts, GET/PUT/DELETE /blog-posts/{id}
    - authors.py:  POST /authors, PUT/DELETE /authors/{id}
    - health.py:   GET /health

Routes are thin: they take the path id and raw JSON body, call the matching
service and pick the status code. Validation and error mapping live in the
services and the global exception handlers.
"""
