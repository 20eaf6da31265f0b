from fastapi import APIRouter, Depends

from conduit.dependencies import CurrentUser, get_current_user, get_user_service
from conduit.exceptions import AuthenticationError
from conduit.schemas import UserLoginRequest, UserRegisterRequest, UserResponse, UserUpdateRequest
from conduit.security import create_access_token
from conduit.services.user_service import UserService
from conduit.views import to_user

router = APIRouter(tags=["users"])


def _user_response(user) -> UserResponse:
    token = create_access_token(user.id, user.username, user.email)
    return UserResponse(user=to_user(user, token))


@router.post("/users", status_code=201, response_model=UserResponse)
async def register(
    data: UserRegisterRequest,
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.create(data.user.username, data.user.email, data.user.password)
    return _user_response(user)


@router.post("/users/login", response_model=UserResponse)
async def login(
    data: UserLoginRequest,
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.authenticate(data.user.email, data.user.password)
    if user is None:
        raise AuthenticationError("Email or password is invalid")
    return _user_response(user)


@router.get("/user", response_model=UserResponse)
async def get_current(
    current: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.find_by_id(current.id)
    if user is None:
        raise AuthenticationError("User not found")
    return _user_response(user)


@router.put("/user", response_model=UserResponse)
async def update_current(
    data: UserUpdateRequest,
    current: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.find_by_id(current.id)
    if user is None:
        raise AuthenticationError("User not found")
    user = await user_service.update(user, data.user.model_dump(exclude_unset=True))
    return _user_response(user)
