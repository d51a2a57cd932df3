from typing import Dict
import os
import logging
from fastapi import Request, HTTPException
from jose import JWTError, jwt
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _authorized_parties():
    raw = os.getenv("CLERK_AUTHORIZED_PARTIES", "")
    return [party.strip() for party in raw.split(",") if party.strip()]


def verify_session_token(token: str) -> Dict[str, str]:
    """
    Verify a Clerk session token against the instance's PEM public key.

    Returns the caller's identity, raises HTTPException(401) when the token
    is missing a subject, expired, or signed by another key.
    """
    public_key = os.getenv("CLERK_JWT_KEY")
    if not public_key:
        logger.error("CLERK_JWT_KEY environment variable not set")
        raise HTTPException(status_code=500, detail="Authentication is not configured")

    try:
        claims = jwt.decode(token, public_key, algorithms=["RS256"], options={"verify_aud": False})
    except JWTError as e:
        logger.warning(f"Rejected session token: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid session token")

    parties = _authorized_parties()
    if parties and claims.get("azp") not in parties:
        raise HTTPException(status_code=401, detail="Invalid session token")

    user_id = claims.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid session token")
    return {"userId": user_id}


async def get_current_user(request: Request):
    """
    Dependency for routes that require a signed-in caller.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Not authenticated")

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    return verify_session_token(token)
