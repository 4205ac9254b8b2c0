from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.models.comment import Comment
from vidshare.models.like import Like, LikeDisposition

__all__ = ["User", "Video", "Comment", "Like", "LikeDisposition"]
