from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional, Dict, Any
import firebase_admin
from firebase_admin import auth, credentials
from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.schemas.user import Profile, ProfileSync
from app.services.profile_service import profile_service
from app.utils.ids import generate_consistent_uuid
import json
import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _firebase_certificate():
    """Service account from FIREBASE_CREDENTIALS_JSON, else from a credentials file."""
    raw = os.getenv("FIREBASE_CREDENTIALS_JSON")
    if raw:
        return credentials.Certificate(json.loads(raw)), "FIREBASE_CREDENTIALS_JSON"

    path = os.getenv("FIREBASE_CREDENTIALS_PATH", "firebase-credentials.json")
    if not os.path.isabs(path):
        path = os.path.join(os.getcwd(), path)
    if os.path.exists(path):
        return credentials.Certificate(path), path
    return None, path


def init_firebase() -> bool:
    """Initialize the Firebase Admin SDK once; False when no credentials are available."""
    if firebase_admin._apps:
        return True

    try:
        cert, source = _firebase_certificate()
    except (ValueError, IOError) as e:
        logger.error(f"Invalid Firebase credentials: {e}")
        return False

    if cert is None:
        logger.warning(f"Firebase credentials not found (checked env var and {source})")
        return False

    firebase_admin.initialize_app(cert)
    logger.info(f"Firebase Admin SDK initialized from {source}")
    return True


firebase_initialized = init_firebase()

security = HTTPBearer(auto_error=False)

# Caller used in TEST_MODE when no X-Test-User header is sent
TEST_USER_ID = "test_user_123"


async def get_current_user_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_test_user: Optional[str] = Header(None),
    x_test_email: Optional[str] = Header(None)
) -> Dict[str, Any]:
    """
    Verify the caller's Firebase ID token and return its uid and email.

    With TEST_MODE on, the X-Test-User and X-Test-Email headers are trusted
    instead.
    """
    if settings.TEST_MODE:
        return {"uid": x_test_user or TEST_USER_ID, "email": x_test_email}

    if not firebase_initialized:
        logger.error("Firebase Admin SDK not initialized")
        raise AuthenticationError("Authentication service not configured")

    if not credentials:
        raise AuthenticationError("Authentication required")

    try:
        decoded = auth.verify_id_token(credentials.credentials)
    except auth.ExpiredIdTokenError:
        raise AuthenticationError("Token has expired")
    except (auth.InvalidIdTokenError, ValueError) as e:
        logger.warning(f"Rejected ID token: {e}")
        raise AuthenticationError("Invalid authentication token")

    return {"uid": decoded["uid"], "email": decoded.get("email")}


async def get_current_user_id(claims: Dict[str, Any] = Depends(get_current_user_claims)) -> str:
    """External (auth provider) id of the caller."""
    return claims["uid"]


async def get_internal_user_id(claims: Dict[str, Any] = Depends(get_current_user_claims)) -> str:
    """Internal id the caller's records are stored under."""
    if claims.get("email"):
        resolved = await profile_service.resolve_user_id(claims["uid"], claims["email"])
        if resolved:
            return resolved
    return generate_consistent_uuid(claims["uid"])


@router.get("/verify")
async def verify_token(user_id: str = Depends(get_current_user_id)):
    """Verify the current user's token."""
    return {
        "valid": True,
        "user_id": user_id,
        "internal_id": generate_consistent_uuid(user_id)
    }


@router.post("/sync", response_model=Profile, response_model_by_alias=True)
async def sync_profile(
    profile: ProfileSync,
    user_id: str = Depends(get_current_user_id)
):
    """Create or refresh the caller's profile after sign-in."""
    return await profile_service.sync_profile(
        external_id=user_id,
        email=profile.email,
        full_name=profile.full_name
    )


@router.get("/me", response_model=Profile, response_model_by_alias=True)
async def get_current_profile(internal_id: str = Depends(get_internal_user_id)):
    """Get the current user's profile."""
    profile = await profile_service.get_by_id(internal_id)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    profile["_id"] = str(profile["_id"])
    return Profile(**profile)
