"""
Editor nonces - short-lived tokens that tie a form submission to the user and
the action it was issued for.

The editor fetches a nonce (GET /products/nonce) when it opens the product
popup and sends it back with the form. A nonce is a signed JWT:
- 'sub': user id
- 'act': action name (e.g. 'create_product')
- 'iat' / 'exp': issue and expiry time from the injected clock
"""
import logging
from datetime import timedelta
from typing import Optional

import jwt

from infrastructure.clock import Clock

logger = logging.getLogger(__name__)

CREATE_PRODUCT_ACTION = 'create_product'
EDIT_PRODUCTS_PERMISSION = 'widgets.edit_products'


class NonceService:
    """Issues and verifies action nonces for editor requests."""

    ALGORITHM = 'HS256'
    DEFAULT_TTL_SECONDS = 43200  # 12 hours

    def __init__(self, secret: str, clock: Clock, ttl: int = DEFAULT_TTL_SECONDS):
        self._secret = secret
        self._clock = clock
        self._ttl = ttl

    @property
    def ttl(self) -> int:
        return self._ttl

    def issue(self, user_id: int, action: str = CREATE_PRODUCT_ACTION) -> str:
        now = self._clock.now()
        payload = {
            'sub': str(user_id),
            'act': action,
            'iat': now,
            'exp': now + timedelta(seconds=self._ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)

    def verify(self, nonce: Optional[str], user_id: int, action: str = CREATE_PRODUCT_ACTION) -> bool:
        """True only for an unexpired nonce issued to this user for this action."""
        if not nonce:
            return False

        try:
            # Expiry is checked against our clock, not the wall clock
            payload = jwt.decode(
                nonce,
                self._secret,
                algorithms=[self.ALGORITHM],
                options={'verify_exp': False, 'verify_iat': False}
            )
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected nonce: {e}", extra={'user_id': user_id, 'action': action})
            return False

        if payload.get('exp', 0) <= self._clock.now_unix():
            logger.info("Rejected expired nonce", extra={'user_id': user_id, 'action': action})
            return False

        return payload.get('sub') == str(user_id) and payload.get('act') == action


def can_edit_products(user) -> bool:
    """Capability check for creating store products from the editor."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return False
    return user.has_perm(EDIT_PRODUCTS_PERMISSION)
