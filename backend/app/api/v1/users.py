# 사용자 라우터 (/api/v1/users)
# - POST  /register         : 회원가입
# - POST  /login            : 로그인 (토큰 쿠키 설정)
# - POST  /logout           : 로그아웃 (인증 필요)
# - POST  /refresh-token    : Access 토큰 재발급 (refresh 토큰 회전)
# - POST  /change-password  : 비밀번호 변경 (인증 필요)
# - GET   /current-user     : 내 정보 (인증 필요)
# - PATCH /update-account   : 이름/이메일 수정 (인증 필요)
# - PATCH /avatar, /cover-image : 이미지 URL 수정 (인증 필요)
# - GET   /history, POST /history/{video_id} : 시청 기록 (인증 필요)
#
# 모든 응답은 ApiResponse envelope, 실패는 ApiError → 중앙 에러 처리기

from typing import List, Optional

from fastapi import APIRouter, Body, Cookie, Depends, Response, status

from ...core.config import settings
from ...core.handlers import async_handler
from ...models.user import User
from ...schemas.response import ApiResponse
from ...schemas.user_schema import (
    ChangePassword,
    LoginResult,
    RefreshTokenRequest,
    TokenPair,
    UpdateAccount,
    UpdateImage,
    UserLogin,
    UserPublic,
    UserRegister,
)
from ...services.auth_service import AuthService, get_auth_service
from ..dependencies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, get_current_user

router = APIRouter(prefix="/users", tags=["users"])


def _set_token_cookies(response: Response, tokens: TokenPair) -> None:
    options = {"httponly": True, "secure": settings.COOKIE_SECURE, "samesite": "lax"}
    response.set_cookie(ACCESS_TOKEN_COOKIE, tokens.access_token, **options)
    response.set_cookie(REFRESH_TOKEN_COOKIE, tokens.refresh_token, **options)


def _clear_token_cookies(response: Response) -> None:
    options = {"httponly": True, "secure": settings.COOKIE_SECURE, "samesite": "lax"}
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **options)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **options)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[UserPublic], summary="회원가입")
@async_handler
async def register(payload: UserRegister, service: AuthService = Depends(get_auth_service)):
    user = await service.register(payload)
    return ApiResponse(status_code=status.HTTP_201_CREATED, data=UserPublic.from_user(user), message="User registered successfully")


@router.post("/login", response_model=ApiResponse[LoginResult], summary="로그인 (Access/Refresh 토큰 발급)")
@async_handler
async def login(payload: UserLogin, response: Response, service: AuthService = Depends(get_auth_service)):
    user, tokens = await service.login(payload.password, username=payload.username, email=payload.email)
    _set_token_cookies(response, tokens)
    result = LoginResult(user=UserPublic.from_user(user), **tokens.model_dump())
    return ApiResponse(data=result, message="User logged in successfully")


@router.post("/logout", response_model=ApiResponse[dict], summary="로그아웃")
@async_handler
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.logout(user)
    _clear_token_cookies(response)
    return ApiResponse(data={}, message="User logged out")


@router.post("/refresh-token", response_model=ApiResponse[TokenPair], summary="Access 토큰 재발급")
@async_handler
async def refresh_token(
    response: Response,
    payload: Optional[RefreshTokenRequest] = Body(default=None),
    cookie_token: Optional[str] = Cookie(default=None, alias=REFRESH_TOKEN_COOKIE),
    service: AuthService = Depends(get_auth_service),
):
    incoming = cookie_token or (payload.refresh_token if payload else None)
    _, tokens = await service.refresh(incoming)
    _set_token_cookies(response, tokens)
    return ApiResponse(data=tokens, message="Access token refreshed")


@router.post("/change-password", response_model=ApiResponse[dict], summary="비밀번호 변경")
@async_handler
async def change_password(
    payload: ChangePassword,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.change_password(user, payload.old_password, payload.new_password)
    return ApiResponse(data={}, message="Password changed successfully")


@router.get("/current-user", response_model=ApiResponse[UserPublic], summary="현재 사용자 조회")
@async_handler
def current_user(user: User = Depends(get_current_user)):
    return ApiResponse(data=UserPublic.from_user(user), message="Current user fetched successfully")


@router.patch("/update-account", response_model=ApiResponse[UserPublic], summary="이름/이메일 수정")
@async_handler
async def update_account(
    payload: UpdateAccount,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.update_account(user, payload.full_name, payload.email)
    return ApiResponse(data=UserPublic.from_user(user), message="Account details updated successfully")


@router.patch("/avatar", response_model=ApiResponse[UserPublic], summary="아바타 URL 수정")
@async_handler
async def update_avatar(
    payload: UpdateImage,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.update_avatar(user, payload.url)
    return ApiResponse(data=UserPublic.from_user(user), message="Avatar updated successfully")


@router.patch("/cover-image", response_model=ApiResponse[UserPublic], summary="커버 이미지 URL 수정")
@async_handler
async def update_cover_image(
    payload: UpdateImage,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.update_cover_image(user, payload.url)
    return ApiResponse(data=UserPublic.from_user(user), message="Cover image updated successfully")


@router.get("/history", response_model=ApiResponse[List[str]], summary="시청 기록 조회")
@async_handler
async def watch_history(
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    return ApiResponse(data=service.get_watch_history(user), message="Watch history fetched successfully")


@router.post("/history/{video_id}", response_model=ApiResponse[List[str]], summary="시청 기록 추가")
@async_handler
async def add_watch_history(
    video_id: str,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = await service.add_to_watch_history(user, video_id)
    return ApiResponse(data=service.get_watch_history(user), message="Video added to watch history")
