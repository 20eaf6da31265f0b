"""
Tag service: tag listing (cache-aside through Redis) and batch
find-or-create for article tag lists.
"""
from conduit.cache import TAGS_KEY, cache
from conduit.config import settings
from conduit.models import Tag
from conduit.repositories import TagRepository


class TagService:
    def __init__(self, tags: TagRepository) -> None:
        self.tags = tags

    async def find_all(self) -> list[str]:
        cached = await cache.get(TAGS_KEY)
        if cached is not None:
            return cached

        names = await self.tags.list_names()
        await cache.set(TAGS_KEY, names, ttl=settings.CACHE_TTL_TAGS)
        return names

    async def find_or_create_by_names(self, names: list[str]) -> list[Tag]:
        """
        Return one Tag per distinct name in *names*, in first-seen order,
        creating the ones that do not exist yet.  Matching is exact and
        case-sensitive.
        """
        unique_names = list(dict.fromkeys(names))
        existing = await self.tags.get_by_names(unique_names)

        created = False
        tags: list[Tag] = []
        for name in unique_names:
            tag = existing.get(name)
            if tag is None:
                tag = await self.tags.add(Tag(name=name))
                created = True
            tags.append(tag)

        if created:
            # The cached list is dropped only once the new tags are committed.
            self.tags.after_commit(cache.invalidate_tags)
        return tags
