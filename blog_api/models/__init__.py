"""
Blog API — ORM Models
======================

Importing this package registers every table on Base.metadata, which both
Alembic's env.py and database.init_models() depend on.
"""

from blog_api.models.author import Author
from blog_api.models.post import Comment, Post

__all__ = ["Author", "Comment", "Post"]
