# Import all models here so Alembic and create_all can detect them
from noitro.db.session import Base

# Import all models below
from noitro.modules.identity.models.user import User
from noitro.modules.posts.models.post import Post, PostTag
from noitro.modules.posts.comments.models.comment import Comment
from noitro.modules.posts.reactions.models.reaction import Reaction
