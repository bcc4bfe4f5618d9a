from .base import Base
from .posts import XPost, InstagramPost, YoutubeComment, RedditPost
