from app.models.church import Church, ChurchAdmin, ChurchServant, ChurchLocation
from app.models.service import ChurchService, LiturgyItem, NewsItem, ServantAssignment

# This makes it easy to import all models at once
__all__ = [
    "Church", "ChurchAdmin", "ChurchServant", "ChurchLocation",
    "ChurchService", "LiturgyItem", "NewsItem", "ServantAssignment",
]
