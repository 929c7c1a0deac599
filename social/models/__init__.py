"""SQLAlchemy ORM models.

Models represent database tables:
- users: Accounts (inactive until the invitation is redeemed)
- user_invitations: Hashed one-time activation tokens
- posts: Versioned posts with tags
- comments: Comments on posts
- followers: Directed follow edges
"""

from social.models.comment import Comment
from social.models.follower import Follower
from social.models.post import Post
from social.models.user import User, UserInvitation

__all__ = ["Comment", "Follower", "Post", "User", "UserInvitation"]
