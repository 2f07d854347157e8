# SPDX-License-Identifier: BSD-2
from typing import Union


class TSS2_Exception(RuntimeError):
    """TSS2_Exception represents a layered return code reported by the TSS or the TPM.

    The message is the decoded return code, ie "tpm:error(2.0): NV access locked".
    """

    # prevent cirular dependency and don't use the types directly here.
    def __init__(self, rc: Union["TSS2_RC", "TPM2_RC", int]):
        from .constants import TPM2_RC
        from .error import tpm2_error_str

        super(TSS2_Exception, self).__init__(tpm2_error_str(rc))

        self._rc = int(rc)
        self._handle = 0
        self._parameter = 0
        self._session = 0
        self._error = 0
        if self._rc & TPM2_RC.FMT1:
            self._parse_fmt1()
        else:
            self._error = self._rc

    def _parse_fmt1(self):
        from .constants import TPM2_RC

        self._error = TPM2_RC.FMT1 + (self.rc & TPM2_RC.FMT1_ERROR_MASK)

        if self.rc & TPM2_RC.P:
            self._parameter = (self.rc & TPM2_RC.N_MASK) >> TPM2_RC.N_SHIFT
        elif self.rc & TPM2_RC.S:
            self._session = ((self.rc - TPM2_RC.S) & TPM2_RC.N_MASK) >> TPM2_RC.N_SHIFT
        else:
            self._handle = (self.rc & TPM2_RC.N_MASK) >> TPM2_RC.N_SHIFT

    @property
    def rc(self):
        """int: The return code from the API call."""
        return self._rc

    @property
    def handle(self):
        """int: The handle related to the error, 0 if not related to any handle."""
        return self._handle

    @property
    def parameter(self):
        """int: The parameter related to the error, 0 if not related to any parameter."""
        return self._parameter

    @property
    def session(self):
        """int: The session related to the error, 0 if not related to any session."""
        return self._session

    @property
    def error(self):
        """int: The error with handle, parameter and session stripped."""
        return self._error

    @property
    def fmt1(self):
        """bool: True if the error is related to a handle, parameter or session """
        from .constants import TPM2_RC

        return bool(self._rc & TPM2_RC.FMT1)

    @property
    def layer(self):
        """int: The layer that produced the return code."""
        from .error import tpm2_error_layer_get

        return tpm2_error_layer_get(self._rc)
