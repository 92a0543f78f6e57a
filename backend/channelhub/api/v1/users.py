"""Account, session and channel endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from channelhub.api.deps import (
    REFRESH_COOKIE,
    clear_session_cookies,
    current_account,
    json_response,
    require_session,
    services,
    set_session_cookies,
    staged_uploads,
    timing,
)
from channelhub.schemas import (
    AccountSchema,
    AccountUpdateSchema,
    ChangePasswordSchema,
    ChannelProfileSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    WatchedVideoSchema,
    envelope,
)
from channelhub.services.accounts.dto import ProfileUpdateIn, RegisterIn
from channelhub.services.auth.dto import ChangePasswordIn, LoginIn

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
change_password_schema = ChangePasswordSchema()
update_schema = AccountUpdateSchema()
account_schema = AccountSchema()
login_response_schema = LoginResponseSchema()
token_pair_schema = TokenPairSchema()
channel_schema = ChannelProfileSchema()
history_schema = WatchedVideoSchema(many=True)


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


# ------------------------------ Sessions ------------------------------------


@bp.post("/register")
@timing
def register():
    """Create an account from a multipart form with ``avatar`` and ``coverImage``."""

    data = register_schema.load(request.form.to_dict())
    with staged_uploads("avatar", "coverImage") as files:
        account = services().accounts.register(
            RegisterIn(
                full_name=data["full_name"],
                email=data["email"],
                username=data["username"],
                password=data["password"],
                avatar=files["avatar"],
                cover=files["coverImage"],
            )
        )
    body = envelope(account_schema.dump(account), "User registered successfully")
    return json_response(body, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate with username or email and open a session."""

    data = login_schema.load(_json_body())
    result = services().sessions.login(
        LoginIn(password=data["password"], username=data["username"], email=data["email"])
    )
    payload = login_response_schema.dump(
        {
            "user": result.account,
            "access_token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
        }
    )
    response = json_response(envelope(payload, "User logged in successfully"))
    return set_session_cookies(response, result.tokens)


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token taken from the cookie or the JSON body."""

    incoming = request.cookies.get(REFRESH_COOKIE) or refresh_schema.load(_json_body()).get(
        "refresh_token"
    )
    pair = services().sessions.refresh(incoming)
    response = json_response(envelope(token_pair_schema.dump(pair), "Access token refreshed"))
    return set_session_cookies(response, pair)


@bp.post("/logout")
@require_session
@timing
def logout():
    services().sessions.logout(current_account().id)
    response = json_response(envelope({}, "User logged out"))
    return clear_session_cookies(response)


@bp.post("/change-password")
@require_session
@timing
def change_password():
    data = change_password_schema.load(_json_body())
    services().sessions.change_password(
        current_account().id,
        ChangePasswordIn(old_password=data["old_password"], new_password=data["new_password"]),
    )
    return json_response(envelope({}, "Password changed successfully"))


# ------------------------------ Profile -------------------------------------


@bp.get("/current-user")
@require_session
@timing
def current_user():
    return json_response(
        envelope(account_schema.dump(current_account()), "Current user fetched successfully")
    )


@bp.patch("/update-account")
@require_session
@timing
def update_account():
    data = update_schema.load(_json_body())
    account = services().accounts.update_profile(
        current_account().id,
        ProfileUpdateIn(full_name=data["full_name"], email=data["email"]),
    )
    return json_response(
        envelope(account_schema.dump(account), "Account details updated successfully")
    )


@bp.patch("/avatar")
@require_session
@timing
def update_avatar():
    with staged_uploads("avatar") as files:
        account = services().accounts.update_avatar(current_account().id, files["avatar"])
    return json_response(envelope(account_schema.dump(account), "Avatar updated successfully"))


@bp.patch("/cover-image")
@require_session
@timing
def update_cover_image():
    with staged_uploads("coverImage") as files:
        account = services().accounts.update_cover(current_account().id, files["coverImage"])
    return json_response(
        envelope(account_schema.dump(account), "Cover image updated successfully")
    )


# ------------------------------ Channels ------------------------------------


@bp.get("/c/<username>")
@require_session
@timing
def channel_profile(username: str):
    channel = services().channels.channel_profile(username, current_account().id)
    return json_response(
        envelope(channel_schema.dump(channel), "User channel fetched successfully")
    )


@bp.post("/c/<username>/subscription")
@require_session
@timing
def subscribe(username: str):
    channel = services().channels.subscribe(current_account().id, username)
    return json_response(envelope(channel_schema.dump(channel), "Subscribed"))


@bp.delete("/c/<username>/subscription")
@require_session
@timing
def unsubscribe(username: str):
    channel = services().channels.unsubscribe(current_account().id, username)
    return json_response(envelope(channel_schema.dump(channel), "Unsubscribed"))


@bp.get("/history")
@require_session
@timing
def watch_history():
    history = services().channels.watch_history(current_account().id)
    return json_response(
        envelope(history_schema.dump(history), "Watch history fetched successfully")
    )


@bp.post("/history/<video_id>")
@require_session
@timing
def record_watch(video_id: str):
    history = services().channels.record_watch(current_account().id, video_id)
    return json_response(envelope(history_schema.dump(history), "Watch history updated"), status=201)
