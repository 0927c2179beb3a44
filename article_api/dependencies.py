from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from article_api.security import TokenClaims, TokenRejected, verify_token

# auto_error=False so a missing header gets the same 401 as a bad token.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    """
    FastAPI dependency that verifies the bearer token.

    Raising here ends the request before the route handler runs, so a
    rejected token never reaches the document store.

    Raises
    ------
    HTTPException(401)
        The header is missing, or the token is malformed, badly signed
        or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = verify_token(credentials.credentials)
    if isinstance(result, TokenRejected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.reason,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result


def require_matching_email(
    email: str,
    claims: TokenClaims = Depends(get_token_claims),
) -> str:
    """
    Second guard for routes scoped to one author: the ``email`` path
    parameter must equal the email the token was issued for.

    Raises
    ------
    HTTPException(403)
        The token belongs to somebody else.
    """
    if claims.email != email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden access",
        )
    return email
