from asgiref.sync import sync_to_async

from ninja import Router
from django.contrib.auth import authenticate, get_user_model
from core.utils.responses import error_response
from .schemas import ErrorSchema, LoginSchema, TokenSchema, RefreshSchema
from .utils import create_token_pair

router = Router()
User = get_user_model()


@router.post("/login", response={200: TokenSchema, 401: ErrorSchema})
async def login(request, payload: LoginSchema):
    """
    Authenticate user with email and password, return access/refresh tokens.
    """
    try:
        user_obj = await User.objects.aget(email__iexact=payload.email)
    except (User.DoesNotExist, User.MultipleObjectsReturned):
        return 401, error_response("Invalid credentials", code=401)

    # authenticate() is sync, must wrap
    @sync_to_async
    def do_authenticate():
        return authenticate(username=user_obj.username, password=payload.password)

    user = await do_authenticate()
    if not user:
        return 401, error_response("Invalid credentials", code=401)

    if not user.is_active:
        return 401, error_response("User account is disabled", code=401)

    return await sync_to_async(create_token_pair)(user)


@router.post("/refresh", response={200: TokenSchema, 401: ErrorSchema})
async def refresh_token(request, payload: RefreshSchema):
    """
    Refresh access token using a valid refresh token.
    """

    # Token operations involve JWT library which is sync
    @sync_to_async
    def refresh_access_token():
        from ninja_jwt.tokens import RefreshToken
        from ninja_jwt.exceptions import TokenError, InvalidToken

        try:
            refresh = RefreshToken(payload.refresh)
        except (TokenError, InvalidToken) as e:
            return None, f"Invalid refresh token: {str(e)}"

        user = User.objects.filter(id=refresh.payload.get("user_id")).first()
        if user is None:
            return None, "User not found"
        if not user.is_active:
            return None, "User account is disabled"

        tokens = create_token_pair(user)
        tokens["access"] = str(refresh.access_token)
        tokens["refresh"] = str(refresh)
        return tokens, None

    result, error = await refresh_access_token()
    if error:
        return 401, error_response(error, code=401)
    return result
