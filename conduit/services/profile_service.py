from conduit.schemas import Profile
from conduit.services.user_service import UserService
from conduit.views import to_profile


class ProfileService:
    """Public profile views, with follow status relative to the viewer."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def get_profile(self, username: str, viewer_id: int | None = None) -> Profile | None:
        user = await self.user_service.find_by_username(username)
        if user is None:
            return None

        following = False
        if viewer_id is not None:
            following = await self.user_service.is_following(viewer_id, user.id)
        return to_profile(user, following)

    async def follow(self, viewer_id: int, username: str) -> Profile:
        target = await self.user_service.follow_user(viewer_id, username)
        return to_profile(target, True)

    async def unfollow(self, viewer_id: int, username: str) -> Profile:
        target = await self.user_service.unfollow_user(viewer_id, username)
        return to_profile(target, False)
