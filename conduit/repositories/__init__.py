# Repositories package.
#
# One repository per stored entity, each bound to a single AsyncSession:
#
#   UserRepository      users, lookups by email / username, uniqueness check
#   FollowRepository    follower → following edges
#   TagRepository       tag names
#   ArticleRepository   filtered, paginated article listing
#   FavoriteRepository  (user, article) edges and per-page counts
#   CommentRepository   comments per article
#
# Services depend on these classes only; none of them commits.
from conduit.repositories.article_repository import ArticleRepository
from conduit.repositories.comment_repository import CommentRepository
from conduit.repositories.favorite_repository import FavoriteRepository
from conduit.repositories.follow_repository import FollowRepository
from conduit.repositories.tag_repository import TagRepository
from conduit.repositories.user_repository import UserRepository

__all__ = [
    "ArticleRepository",
    "CommentRepository",
    "FavoriteRepository",
    "FollowRepository",
    "TagRepository",
    "UserRepository",
]
