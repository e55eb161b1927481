"""
Blog API — Services Layer
==========================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services receive the request's AsyncSession and the raw JSON body,
       validate, run the store calls and return response schemas.

Service Inventory:
    - AuthorService: create/update/delete authors, user name uniqueness,
      cascade delete of an author's posts
    - PostService: list/get/create/update/delete posts, author resolution

Services are stateless singletons; every call gets its own session, so they
are safe to share across concurrent requests.
"""
