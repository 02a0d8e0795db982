"""
api/routes/auth.py -- Registration, login and token refresh endpoints.

Routes:
  POST /register  -- store credentials; 200 {"message": "registered"}
  POST /login     -- verify credentials; 200 token pair
  POST /refresh   -- exchange a refresh token for a new pair; 200 token pair

Auth policy: all three are public -- they are how a client gets a token.

Error mapping (raised by AuthFlow, rendered by the AuthFlowError handler in
api/main.py):
  InputError        -> 400 {"error": "invalid input"}
  AuthError         -> 401 {"error": "unauthorized"} (login)
                       401 {"error": "invalid refresh token"} (refresh)
  TokenSigningError -> 500 {"error": "token generation failed"}

Security:
  [C1] Login never distinguishes unknown user from wrong password; the
       CredentialStore equalizes bcrypt timing between the two.
  [M5] Cache-Control: no-store on every response carrying tokens.

Handlers are plain `def` so FastAPI runs them in its thread pool; bcrypt
would otherwise block the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import CredentialsRequest, MessageResponse, RefreshRequest, TokenPairResponse
from auth.flow import AuthFlow

router = APIRouter()


def _token_response(response: TokenPairResponse) -> JSONResponse:
    resp = JSONResponse(status_code=200, content=response.model_dump())
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


@router.post("/register", response_model=MessageResponse)
def register(request: Request, body: CredentialsRequest) -> MessageResponse:
    """Register a username and password.

    Re-registering an existing username replaces its password.
    """
    flow: AuthFlow = request.app.state.auth_flow
    flow.register(body.username, body.password)
    return MessageResponse(message="registered")


@router.post("/login", response_model=TokenPairResponse)
def login(request: Request, body: CredentialsRequest) -> JSONResponse:
    """Authenticate with username and password; return an access/refresh pair."""
    flow: AuthFlow = request.app.state.auth_flow
    pair = flow.login(body.username, body.password)
    return _token_response(TokenPairResponse.from_pair(pair))


@router.post("/refresh", response_model=TokenPairResponse)
def refresh(request: Request, body: RefreshRequest) -> JSONResponse:
    """Rotate: trade a valid refresh token for a brand-new pair.

    The presented refresh token is not revoked and stays valid until it expires.
    """
    flow: AuthFlow = request.app.state.auth_flow
    pair = flow.refresh(body.refresh_token)
    return _token_response(TokenPairResponse.from_pair(pair))
