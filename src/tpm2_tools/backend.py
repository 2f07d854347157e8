# SPDX-License-Identifier: BSD-2
"""
Executes the TPM commands of the tools with tpm2-pytss.

Requires the esapi extra: pip install tpm2-tools-py[esapi]
"""
import contextlib
import logging
from typing import Optional, Union

from tpm2_pytss import ESAPI, TCTI
from tpm2_pytss import TSS2_Exception as _ESAPI_Exception

from . import config
from .TSS2_Exception import TSS2_Exception

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _translate_rc():
    try:
        yield
    except _ESAPI_Exception as e:
        raise TSS2_Exception(e.rc) from e


class ESAPIBackend:
    """An ESAPI context whose failures raise :class:`tpm2_tools.TSS2_Exception`.

    Args:
        tcti (Union[TCTI, str]): The TCTI or TCTI configuration string to
            connect with, defaults to the configured TCTI.
    """

    def __init__(self, tcti: Optional[Union[TCTI, str]] = None):
        if tcti is None:
            tcti = config.TCTI
        logger.debug(f"connecting to TPM with {tcti}")
        with _translate_rc():
            self._ectx = ESAPI(tcti)

    def create_primary(self, in_sensitive, in_public="rsa2048", **kwargs):
        with _translate_rc():
            return self._ectx.create_primary(in_sensitive, in_public, **kwargs)

    def tr_set_auth(self, esys_handle, auth):
        with _translate_rc():
            return self._ectx.tr_set_auth(esys_handle, auth)

    def flush_context(self, flush_handle):
        with _translate_rc():
            return self._ectx.flush_context(flush_handle)

    def close(self):
        self._ectx.close()

    def __enter__(self):
        return self

    def __exit__(self, _type, value, traceback):
        self.close()
