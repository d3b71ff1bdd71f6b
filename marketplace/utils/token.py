from jose import jwt, JWTError
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from marketplace.config import settings
from marketplace.database import get_session
from marketplace.models.profile import Profile

# tokens come from the external identity provider
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

ROLES = ("customer", "seller")


def decode_access_token(token: str):
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError:
        return None


def _profile_from_claims(payload: dict) -> Profile:
    metadata = payload.get("user_metadata") or {}
    role = metadata.get("role") or payload.get("role")
    return Profile(
        id=payload["sub"],
        email=payload.get("email", ""),
        full_name=metadata.get("full_name") or payload.get("name") or "",
        role=role if role in ROLES else "customer",
    )


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session)
) -> Profile:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    profile = session.get(Profile, payload["sub"])

    # first request from a newly signed-up identity
    if profile is None:
        profile = _profile_from_claims(payload)
        session.add(profile)
        session.commit()
        session.refresh(profile)

    return profile


def get_current_customer(current_user: Profile = Depends(get_current_user)) -> Profile:
    if current_user.role != "customer":
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Customer account required")
    return current_user


def get_current_seller(current_user: Profile = Depends(get_current_user)) -> Profile:
    if current_user.role != "seller":
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Seller access required")
    return current_user
