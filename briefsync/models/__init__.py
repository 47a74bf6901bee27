"""SQLAlchemy database models."""
from dotenv import load_dotenv
from briefsync.models.base import Base
from briefsync.models.content_brief import ContentBrief

load_dotenv()

__all__ = ["Base", "ContentBrief"]
