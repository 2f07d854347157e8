# SPDX-License-Identifier: BSD-2
import logging
from typing import Union

from .constants import ESYS_TR

logger = logging.getLogger(__name__)


class PasswordSession:
    """Authorizes an object with its plain auth value.

    Args:
        auth (Union[bytes, str]): The auth value of the object, defaults to the
            empty auth.
    """

    def __init__(self, auth: Union[bytes, str] = b""):
        if isinstance(auth, str):
            auth = auth.encode()
        self.auth = auth

    def get_shandle(self, ectx, esys_handle: ESYS_TR) -> ESYS_TR:
        """Prepares the object for a password authorization.

        Sets the auth value of the object on the ESAPI context and returns the
        password pseudo session, ESYS_TR.PASSWORD, to use as session1.
        """
        logger.debug(f"using password session for {ESYS_TR.to_string(esys_handle)}")
        ectx.tr_set_auth(esys_handle, self.auth)
        return ESYS_TR.PASSWORD
