from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialises with camelCase aliases and accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- User ---

class UserRegister(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: str = Field(max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=72)


class UserRegisterRequest(BaseModel):
    user: UserRegister


class UserLogin(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserLoginRequest(BaseModel):
    user: UserLogin


class UserUpdate(BaseModel):
    username: str | None = Field(None, min_length=1, max_length=50)
    email: str | None = Field(None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str | None = Field(None, min_length=1, max_length=72)
    bio: str | None = None
    image: str | None = Field(None, max_length=500)


class UserUpdateRequest(BaseModel):
    user: UserUpdate


class UserView(BaseModel):
    email: str
    token: str
    username: str
    bio: str
    image: str


class UserResponse(BaseModel):
    user: UserView


# --- Profile ---

class Profile(BaseModel):
    username: str
    bio: str
    image: str
    following: bool = False


class ProfileResponse(BaseModel):
    profile: Profile


# --- Article ---

class ArticleCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(max_length=500)
    body: str = Field(min_length=1)
    tag_list: list[str] = []


class ArticleCreateRequest(BaseModel):
    article: ArticleCreate


class ArticleUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)
    body: str | None = Field(None, min_length=1)
    tag_list: list[str] | None = None


class ArticleUpdateRequest(BaseModel):
    article: ArticleUpdate


class ArticleView(CamelModel):
    slug: str
    title: str
    description: str
    body: str
    tag_list: list[str]
    created_at: datetime
    updated_at: datetime
    favorited: bool
    favorites_count: int
    author: Profile


class ArticleResponse(BaseModel):
    article: ArticleView


class MultipleArticlesResponse(CamelModel):
    articles: list[ArticleView]
    articles_count: int


# --- Comment ---

class CommentCreate(BaseModel):
    body: str = Field(min_length=1)


class CommentCreateRequest(BaseModel):
    comment: CommentCreate


class CommentView(CamelModel):
    id: int
    body: str
    created_at: datetime
    updated_at: datetime
    author: Profile


class CommentResponse(BaseModel):
    comment: CommentView


class MultipleCommentsResponse(BaseModel):
    comments: list[CommentView]


# --- Tag ---

class TagsResponse(BaseModel):
    tags: list[str]


# --- Misc ---

class MessageResponse(BaseModel):
    message: str
